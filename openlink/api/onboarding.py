from flask import Blueprint, request, jsonify, g, current_app
from openlink.api.serializers import profile_to_dict
from openlink.middleware.auth import require_auth
from openlink.services.stores import SqlProfileStore
from openlink.services.usernames import check_availability, claim_username, normalize_username

bp = Blueprint('onboarding', __name__, url_prefix='/api/onboarding')


@bp.route('/username', methods=['GET'])
@require_auth
def username_availability():
    """Live availability check while the user types."""
    username = normalize_username(request.args.get('username'))
    result = check_availability(
        username, SqlProfileStore(), current_app.config['RESERVED_USERNAMES']
    )
    return jsonify(result)


@bp.route('/claim', methods=['POST'])
@require_auth
def claim():
    """Claim a username; creates the profile row if the signup trigger has not."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('username'):
        return jsonify({'error': 'username is required'}), 400

    profile = claim_username(
        g.user_id,
        data['username'],
        SqlProfileStore(),
        current_app.config['RESERVED_USERNAMES'],
        jwt_payload=g.jwt_payload,
    )
    return jsonify({'profile': profile_to_dict(profile), 'redirect': '/admin'})
