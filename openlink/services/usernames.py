"""Username validation and the one-time claim.

A profile moves from unclaimed to claimed exactly once. Checks run in a
fixed order (format, length, reserved word, uniqueness) and the first
failure wins.
"""

import logging
import re

from openlink.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

USERNAME_CHARS = re.compile(r'[a-z0-9_-]+')
MIN_LENGTH = 3
MAX_LENGTH = 30


def normalize_username(raw):
    return (raw or '').strip().lower()


def validate_username(username, reserved):
    """Raise ValidationError unless ``username`` is well formed and not reserved."""
    if not USERNAME_CHARS.fullmatch(username):
        raise ValidationError(
            'Username can only contain lowercase letters, numbers, hyphens, and underscores.'
        )
    if len(username) < MIN_LENGTH:
        raise ValidationError(f'Username must be at least {MIN_LENGTH} characters.')
    if len(username) > MAX_LENGTH:
        raise ValidationError(f'Username must be {MAX_LENGTH} characters or less.')
    if username in reserved:
        raise ValidationError('This username is reserved.')


def ensure_available(username, profile_store, reserved):
    validate_username(username, reserved)
    if profile_store.find_by_username(username) is not None:
        raise ConflictError('This username is already taken.')


def check_availability(username, profile_store, reserved):
    """Report availability without raising: ``{'available': bool, 'error': str|None}``."""
    try:
        ensure_available(username, profile_store, reserved)
    except (ValidationError, ConflictError) as e:
        return {'available': False, 'error': e.message}
    return {'available': True, 'error': None}


def default_display_name(jwt_payload, username):
    metadata = (jwt_payload or {}).get('user_metadata') or {}
    if metadata.get('full_name'):
        return metadata['full_name']
    email = (jwt_payload or {}).get('email') or ''
    if email:
        return email.split('@')[0]
    return username


def claim_username(owner_id, raw_username, profile_store, reserved, jwt_payload=None):
    """Claim a username for ``owner_id``.

    Updates the profile row, or inserts it when the account-creation
    trigger has not created it yet. A profile that already has a username
    cannot claim another one.
    """
    username = normalize_username(raw_username)
    profile = profile_store.get(owner_id)
    if profile is not None and profile.has_username:
        raise ConflictError('Username already claimed', redirect='/admin')

    ensure_available(username, profile_store, reserved)

    fields = {
        'username': username,
        'display_name': default_display_name(jwt_payload, username),
    }
    if profile is None:
        profile = profile_store.insert(owner_id, fields)
    else:
        profile = profile_store.update(owner_id, fields)
    logger.info('Profile %s claimed username %s', owner_id, username)
    return profile
