import logging

from openlink.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

_MOBILE_MARKERS = ('mobi', 'android', 'iphone', 'ipod', 'ipad', 'tablet', 'silk', 'kindle', 'opera mini')


def classify_device(user_agent, mobile_hint=None):
    """Bucket a request into 'mobile' or 'desktop'.

    Phones and tablets count as mobile. The ``Sec-CH-UA-Mobile`` client hint
    wins when the browser sends it.
    """
    if mobile_hint is not None:
        hint = mobile_hint.strip()
        if hint == '?1':
            return 'mobile'
        if hint == '?0':
            return 'desktop'
    ua = (user_agent or '').lower()
    if any(marker in ua for marker in _MOBILE_MARKERS):
        return 'mobile'
    return 'desktop'


def resolve_click(link_id, link_store, click_store, user_agent, mobile_hint=None):
    """Return the destination for ``link_id`` and record one click.

    Dead links (unknown id, empty target) raise NotFoundError and record
    nothing. Failing to record the click never blocks the redirect.
    """
    link = link_store.get(link_id)
    if link is None or not (link.target_url or '').strip():
        raise NotFoundError('Link not found')

    device_class = classify_device(user_agent, mobile_hint)
    try:
        click_store.append(link_id, device_class)
    except PersistenceError:
        logger.warning('Click on %s was not recorded', link_id, exc_info=True)

    return link.target_url
