from flask import Blueprint, jsonify, g
from openlink.api.serializers import link_to_dict, profile_to_dict
from openlink.middleware.auth import require_auth, require_profile
from openlink.services.stores import SqlLinkStore

bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@bp.route('/session', methods=['GET'])
@require_auth
@require_profile
def get_session():
    """Snapshot the dashboard starts from: profile plus ordered links."""
    links = SqlLinkStore().list(g.user_id)
    return jsonify({
        'profile': profile_to_dict(g.user_profile),
        'email': g.jwt_payload.get('email', ''),
        'links': [link_to_dict(link) for link in links],
    })
