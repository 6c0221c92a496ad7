from flask import Blueprint, request, jsonify, g, current_app
from openlink.api.serializers import profile_to_dict
from openlink.errors import ValidationError
from openlink.middleware.auth import require_auth, require_profile
from openlink.services.storage import AvatarStorage
from openlink.services.stores import SqlProfileStore
from openlink.services.theme import validate_button_style, validate_color

bp = Blueprint('profile', __name__, url_prefix='/api/profile')

_TEXT_LIMITS = {'display_name': 100, 'bio': 500}


@bp.route('', methods=['GET'])
@require_auth
@require_profile
def get_profile():
    return jsonify({'profile': profile_to_dict(g.user_profile)})


@bp.route('', methods=['PATCH'])
@require_auth
@require_profile
def update_profile():
    """Update display fields and theme. Unchanged values are not written."""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'Request body is required'}), 400

    fields = {}
    for field, limit in _TEXT_LIMITS.items():
        if field in data:
            value = data[field] or ''
            if not isinstance(value, str):
                raise ValidationError(f'{field} must be a string')
            if len(value) > limit:
                raise ValidationError(f'{field} must be {limit} characters or less')
            fields[field] = value
    for field in ('background_color', 'accent_color'):
        if field in data:
            fields[field] = validate_color(field, data[field])
    if 'button_style' in data:
        fields['button_style'] = validate_button_style(data['button_style'])

    profile = g.user_profile
    changed = {k: v for k, v in fields.items() if getattr(profile, k) != v}
    if changed:
        profile = SqlProfileStore().update(g.user_id, changed)

    return jsonify({'profile': profile_to_dict(profile)})


@bp.route('/avatar', methods=['POST'])
@require_auth
@require_profile
def upload_avatar():
    """Upload an avatar image and point the profile at it."""
    file = request.files.get('file')
    if not file or not file.filename:
        return jsonify({'error': 'file is required'}), 400

    data = file.read()
    if len(data) > current_app.config['AVATAR_MAX_BYTES']:
        raise ValidationError('Avatar image is too large')

    storage = AvatarStorage.from_config(current_app.config)
    token = current_app.config['SUPABASE_SERVICE_KEY'] or g.access_token
    avatar_url = storage.upload(g.user_id, file.filename, data, file.mimetype, token)

    profile = SqlProfileStore().update(g.user_id, {'avatar_url': avatar_url})
    return jsonify({'profile': profile_to_dict(profile)})
