from flask import Blueprint, jsonify, current_app, url_for
from openlink.errors import NotFoundError
from openlink.services.stores import SqlLinkStore, SqlProfileStore
from openlink.services.theme import resolve_theme

bp = Blueprint('public', __name__, url_prefix='/api/public')


def _public_link(link):
    """Public links point at the click redirect, never the raw destination."""
    return {
        'id': link.id,
        'title': link.title or 'Untitled Link',
        'icon': link.icon,
        'href': url_for('click.click_through', link_id=link.id),
    }


def _page_meta(profile, config):
    name = profile.display_name or profile.username
    site = config['SITE_NAME']
    title = f'{name} | {site}'
    description = profile.bio or f"Check out {name}'s links on {site}."
    image = profile.avatar_url or config['DEFAULT_OG_IMAGE']
    return {
        'title': title,
        'description': description,
        'open_graph': {
            'type': 'profile',
            'url': f'/{profile.username}',
            'image': image,
            'image_alt': f"{name}'s avatar",
        },
        'twitter_card': 'summary_large_image',
    }


@bp.route('/<username>', methods=['GET'])
def get_public_page(username):
    """Everything a renderer needs for one public profile page."""
    profile = SqlProfileStore().find_by_username(username.lower())
    if profile is None:
        raise NotFoundError('User not found')

    links = SqlLinkStore().list(profile.id, active_only=True)
    config = current_app.config

    return jsonify({
        'profile': {
            'username': profile.username,
            'display_name': profile.display_name or profile.username,
            'bio': profile.bio,
            'avatar_url': profile.avatar_url,
        },
        'theme': resolve_theme(profile, config),
        'links': [_public_link(link) for link in links],
        'meta': _page_meta(profile, config),
    })
