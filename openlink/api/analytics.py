from flask import Blueprint, jsonify, g
from openlink.middleware.auth import require_auth, require_profile
from openlink.models.click import DEVICE_CLASSES
from openlink.services.stores import SqlClickStore, SqlLinkStore

bp = Blueprint('analytics', __name__, url_prefix='/api/analytics')


@bp.route('', methods=['GET'])
@require_auth
@require_profile
def get_analytics():
    """Lifetime click counts: total, per link (most clicked first), per device."""
    links = SqlLinkStore().list(g.user_id)
    link_ids = [link.id for link in links]

    clicks = SqlClickStore()
    by_link = clicks.count_by_link(link_ids)
    by_device = clicks.count_by_device(link_ids)

    rows = [
        {
            'id': link.id,
            'title': link.title or 'Untitled Link',
            'target_url': link.target_url,
            'clicks': by_link.get(link.id, 0),
        }
        for link in links
    ]
    rows.sort(key=lambda row: row['clicks'], reverse=True)

    return jsonify({
        'total_clicks': sum(by_link.values()),
        'links': rows,
        'devices': {device: by_device.get(device, 0) for device in DEVICE_CLASSES},
    })
