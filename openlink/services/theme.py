import re

from openlink.errors import ValidationError
from openlink.models.profile import BUTTON_STYLES

HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def contrast_color(hex_color: str) -> str:
    """Black or white, whichever reads better on ``hex_color`` (YIQ)."""
    value = hex_color.lstrip('#')
    if len(value) == 3:
        value = ''.join(c * 2 for c in value)
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return '#000000' if yiq >= 128 else '#ffffff'


def validate_color(field, value):
    if value in (None, ''):
        return None
    if not isinstance(value, str) or not HEX_COLOR.match(value):
        raise ValidationError(f'{field} must be a hex color like #1a2b3c')
    return value.lower()


def validate_button_style(value):
    if value not in BUTTON_STYLES:
        raise ValidationError(f"button_style must be one of: {', '.join(BUTTON_STYLES)}")
    return value


def resolve_theme(profile, defaults):
    """Colours and button shape a renderer needs for one profile."""
    background = profile.background_color or defaults['DEFAULT_BACKGROUND_COLOR']
    accent = profile.accent_color or defaults['DEFAULT_ACCENT_COLOR']
    button_style = profile.button_style if profile.button_style in BUTTON_STYLES else 'solid'

    if button_style == 'outline':
        button = {'background_color': 'rgba(255,255,255,0.08)', 'border_color': accent, 'text_color': accent}
    else:
        button = {'background_color': accent, 'border_color': None, 'text_color': contrast_color(accent)}

    return {
        'background_color': background,
        'accent_color': accent,
        'text_color': contrast_color(background),
        'button_style': button_style,
        'button_shape': 'pill' if button_style == 'rounded' else 'rounded',
        'button': button,
    }
