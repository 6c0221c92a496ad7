from flask import Blueprint, request, jsonify, g
from openlink.api.serializers import link_to_dict
from openlink.errors import ValidationError
from openlink.middleware.auth import require_auth, require_profile
from openlink.services.link_list import LinkListController
from openlink.services.ordering import resolve_drop
from openlink.services.stores import SqlLinkStore

bp = Blueprint('links', __name__, url_prefix='/api/links')


def _load_controller():
    return LinkListController.load(g.user_id, SqlLinkStore())


def _unsaved(controller):
    return sorted(controller.dirty)


@bp.route('', methods=['GET'])
@require_auth
@require_profile
def list_links():
    """List the owner's links, ascending by order."""
    controller = _load_controller()
    return jsonify({'links': [link_to_dict(link) for link in controller.links]})


@bp.route('', methods=['POST'])
@require_auth
@require_profile
def create_link():
    """Add an empty, inactive link at the top of the list."""
    controller = _load_controller()
    link = controller.add()
    return jsonify({'link': link_to_dict(link)}), 201


@bp.route('/<link_id>', methods=['PATCH'])
@require_auth
@require_profile
def update_link(link_id):
    """Commit title/target_url edits and/or toggle is_active.

    Text edits are only written when they differ from the stored value.
    """
    controller = _load_controller()
    controller.get(link_id)

    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'Request body is required'}), 400

    # Reject the whole request before anything is written
    for field in ('title', 'target_url'):
        if field in data and data[field] is not None and not isinstance(data[field], str):
            raise ValidationError(f'{field} must be a string')
    if 'is_active' in data and not isinstance(data['is_active'], bool):
        raise ValidationError('is_active must be true or false')

    for field in ('title', 'target_url'):
        if field in data:
            controller.edit(link_id, field, data[field])
    controller.commit(link_id)

    if 'is_active' in data:
        controller.toggle(link_id, data['is_active'])

    return jsonify({
        'link': link_to_dict(controller.get(link_id)),
        'unsaved': _unsaved(controller),
    })


@bp.route('/reorder', methods=['POST'])
@require_auth
@require_profile
def reorder_links():
    """Move one link.

    Accepts either ``{link_id, from_index, to_index}`` or the raw drop
    ``{active_id, over_id}``.
    """
    controller = _load_controller()

    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'Request body is required'}), 400

    if 'active_id' in data:
        move = resolve_drop(controller.ids, data['active_id'], data.get('over_id'))
    else:
        missing = [f for f in ('link_id', 'from_index', 'to_index') if f not in data]
        if missing:
            return jsonify({'error': f'{missing[0]} is required'}), 400
        move = (data['link_id'], data['from_index'], data['to_index'])

    writes = controller.reorder(*move) if move else 0

    return jsonify({
        'links': [link_to_dict(link) for link in controller.links],
        'writes': writes,
        'unsaved': _unsaved(controller),
    })


@bp.route('/<link_id>', methods=['DELETE'])
@require_auth
@require_profile
def delete_link(link_id):
    """Remove a link."""
    controller = _load_controller()
    deleted = controller.delete(link_id)
    return jsonify({'ok': deleted, 'unsaved': _unsaved(controller)})
