"""Tests for the real JWT decorators (conftest swaps them out for the API tests)."""

from unittest.mock import patch

import jwt
import pytest
from flask import g, jsonify

from openlink.extensions import db
from openlink.models.profile import Profile
from tests.conftest import TEST_USER_ID, _original_require_auth
from openlink.middleware.auth import require_profile


@pytest.fixture
def auth_app(app):
    @app.route('/_test/protected')
    @_original_require_auth
    def protected():
        return jsonify(user_id=g.user_id, has_profile=g.user_profile is not None)

    @app.route('/_test/admin')
    @_original_require_auth
    @require_profile
    def admin_only():
        return jsonify(ok=True)

    return app


@pytest.fixture
def auth_client(auth_app):
    with auth_app.test_client() as test_client:
        yield test_client


def _bearer(token='header.payload.sig'):
    return {'Authorization': f'Bearer {token}'}


class TestRequireAuth:
    def test_missing_token(self, auth_client):
        resp = auth_client.get('/_test/protected')
        assert resp.status_code == 401
        assert resp.get_json() == {'error': 'Missing authorization token', 'redirect': '/login'}

    @patch('openlink.middleware.auth._decode_token')
    def test_expired_token(self, mock_decode, auth_client):
        mock_decode.side_effect = jwt.ExpiredSignatureError()
        resp = auth_client.get('/_test/protected', headers=_bearer())
        assert resp.status_code == 401
        assert resp.get_json()['error'] == 'Token expired'

    @patch('openlink.middleware.auth._decode_token')
    def test_invalid_token(self, mock_decode, auth_client):
        mock_decode.side_effect = jwt.InvalidTokenError()
        resp = auth_client.get('/_test/protected', headers=_bearer())
        assert resp.status_code == 401

    @patch('openlink.middleware.auth._decode_token')
    def test_payload_without_subject(self, mock_decode, auth_client):
        mock_decode.return_value = {'email': 'x@example.com'}
        resp = auth_client.get('/_test/protected', headers=_bearer())
        assert resp.status_code == 401

    @patch('openlink.middleware.auth._decode_token')
    def test_valid_token(self, mock_decode, auth_client):
        mock_decode.return_value = {'sub': TEST_USER_ID}
        resp = auth_client.get('/_test/protected', headers=_bearer())
        assert resp.status_code == 200
        assert resp.get_json() == {'user_id': TEST_USER_ID, 'has_profile': True}

    @patch('openlink.middleware.auth._decode_token')
    def test_profile_is_not_created_on_first_request(self, mock_decode, auth_client):
        mock_decode.return_value = {'sub': 'brand-new'}
        resp = auth_client.get('/_test/protected', headers=_bearer())
        assert resp.get_json()['has_profile'] is False
        assert db.session.get(Profile, 'brand-new') is None


class TestRequireProfile:
    @patch('openlink.middleware.auth._decode_token')
    def test_unclaimed_user_is_sent_to_onboarding(self, mock_decode, auth_client):
        mock_decode.return_value = {'sub': 'brand-new'}
        resp = auth_client.get('/_test/admin', headers=_bearer())
        assert resp.status_code == 404
        assert resp.get_json()['redirect'] == '/onboarding'

    @patch('openlink.middleware.auth._decode_token')
    def test_claimed_user_passes(self, mock_decode, auth_client):
        mock_decode.return_value = {'sub': TEST_USER_ID}
        assert auth_client.get('/_test/admin', headers=_bearer()).status_code == 200
