import uuid
from functools import wraps

import pytest
from flask import g, request

# Patch auth decorators BEFORE importing create_app, so blueprints
# are registered with the mocked versions.
import openlink.middleware.auth as auth_module

TEST_USER_ID = str(uuid.uuid4())
TEST_USERNAME = 'tester'

_original_require_auth = auth_module.require_auth


def _mock_identity():
    """Resolve the caller from the X-Test-User header (default: TEST_USER_ID)."""
    from openlink.extensions import db
    from openlink.models.profile import Profile
    user_id = request.headers.get('X-Test-User', TEST_USER_ID)
    g.user_id = user_id
    g.user_profile = db.session.get(Profile, user_id)
    g.jwt_payload = {'sub': user_id, 'email': 'test@example.com'}
    g.access_token = 'test-token'


def _mock_require_auth(f):
    """Mock require_auth: skip JWT validation; 'anonymous' behaves like no token."""
    @wraps(f)
    def decorated(*args, **kwargs):
        from openlink.errors import AuthorizationError
        if request.headers.get('X-Test-User') == 'anonymous':
            raise AuthorizationError('Missing authorization token')
        _mock_identity()
        return f(*args, **kwargs)
    return decorated


# Apply patches before any blueprint imports
auth_module.require_auth = _mock_require_auth

from openlink import create_app
from openlink.extensions import db as _db
from openlink.config import TestConfig
from openlink.models.profile import Profile


@pytest.fixture
def app():
    """Create a test Flask application with SQLite in-memory database."""
    application = create_app(TestConfig)

    with application.app_context():
        _db.create_all()

        # Create a test user profile with a claimed username
        profile = Profile(
            id=TEST_USER_ID,
            username=TEST_USERNAME,
            display_name='Test User',
        )
        _db.session.add(profile)
        _db.session.commit()

        yield application

        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client with mocked JWT auth."""
    with app.test_client() as test_client:
        yield test_client
