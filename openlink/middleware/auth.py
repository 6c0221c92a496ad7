import jwt
from jwt import PyJWKClient
from functools import wraps
from flask import request, g, current_app
from openlink.errors import AuthorizationError, NotFoundError
from openlink.extensions import db
from openlink.models.profile import Profile

# Module-level JWKS client (cached, so keys are not fetched on every request)
_jwks_client = None


def _get_jwks_client():
    global _jwks_client
    if _jwks_client is None:
        jwks_url = current_app.config['SUPABASE_URL'] + '/auth/v1/.well-known/jwks.json'
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True)
    return _jwks_client


def _decode_token(token):
    """Decode and verify a Supabase JWT using the JWKS endpoint (ES256)."""
    client = _get_jwks_client()
    signing_key = client.get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=['ES256'],
        audience='authenticated'
    )


def _bearer_token():
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith('Bearer '):
        return auth_header[7:]
    return None


def _set_identity(user_id, payload, token):
    g.user_id = user_id
    g.jwt_payload = payload
    g.access_token = token
    # May be None: the profile row is created by a database trigger on signup
    g.user_profile = db.session.get(Profile, user_id)


def require_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise AuthorizationError('Missing authorization token')

        try:
            payload = _decode_token(token)
        except jwt.ExpiredSignatureError:
            raise AuthorizationError('Token expired')
        except jwt.InvalidTokenError:
            raise AuthorizationError('Invalid token')

        user_id = payload.get('sub')
        if not user_id:
            raise AuthorizationError('Invalid token payload')

        _set_identity(user_id, payload, token)
        return f(*args, **kwargs)
    return decorated


def require_profile(f):
    """Admin routes: the caller must have claimed a username.

    Apply beneath require_auth.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        profile = g.user_profile
        if profile is None or not profile.has_username:
            raise NotFoundError('Profile not found', redirect='/onboarding')
        return f(*args, **kwargs)
    return decorated
