from flask import Blueprint, request, jsonify, redirect
from openlink.services.clicks import resolve_click
from openlink.services.stores import SqlClickStore, SqlLinkStore

bp = Blueprint('click', __name__, url_prefix='/api')


@bp.route('/click', methods=['GET'])
def click_through():
    """Record a click on a public link and redirect to its destination."""
    link_id = request.args.get('link_id')
    if not link_id:
        return jsonify({'error': 'link_id is required'}), 400

    target = resolve_click(
        link_id,
        SqlLinkStore(),
        SqlClickStore(),
        request.headers.get('User-Agent', ''),
        request.headers.get('Sec-CH-UA-Mobile'),
    )
    return redirect(target, code=302)
