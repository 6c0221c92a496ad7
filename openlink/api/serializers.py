def link_to_dict(link):
    """Serialize a LinkRecord for the owner's dashboard."""
    return {
        'id': link.id,
        'title': link.title,
        'target_url': link.target_url,
        'order': link.order,
        'is_active': link.is_active,
        'icon': link.icon,
        'created_at': link.created_at.isoformat() if link.created_at else None,
    }


def profile_to_dict(profile):
    return {
        'id': profile.id,
        'username': profile.username,
        'display_name': profile.display_name,
        'bio': profile.bio,
        'avatar_url': profile.avatar_url,
        'background_color': profile.background_color,
        'accent_color': profile.accent_color,
        'button_style': profile.button_style or 'solid',
    }
