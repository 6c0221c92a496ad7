from openlink.models.profile import Profile
from openlink.models.link import Link
from openlink.models.click import ClickEvent

__all__ = ['Profile', 'Link', 'ClickEvent']
