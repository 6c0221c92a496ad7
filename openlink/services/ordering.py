"""Link ordering policy.

Pure functions over sequences of link ids. Order values are re-derived as
consecutive integers (0, 1, 2, ...) after every move rather than kept
sparse, so a reorder rewrites every link whose position changed. New links
take an order below the current minimum so they surface first without
renumbering anything.
"""

from openlink.errors import ValidationError


def _check_index(name, index, size):
    if not isinstance(index, int) or isinstance(index, bool):
        raise ValidationError(f'{name} must be an integer')
    if index < 0 or index >= size:
        raise ValidationError(f'{name} {index} is out of range for {size} links')


def move(items, from_index, to_index):
    """Return a new list with the item at ``from_index`` moved to ``to_index``."""
    items = list(items)
    _check_index('from_index', from_index, len(items))
    _check_index('to_index', to_index, len(items))
    item = items.pop(from_index)
    items.insert(to_index, item)
    return items


def sequential_orders(ids):
    """Map each id to its position in ``ids``."""
    return {link_id: position for position, link_id in enumerate(ids)}


def reorder(ids, from_index, to_index):
    """Compute the full ``{id: order}`` mapping after a move.

    Returns an empty mapping when there is nothing to do: lists of zero or
    one link, or a move onto the item's own position.
    """
    ids = list(ids)
    if len(ids) <= 1:
        return {}
    if from_index == to_index:
        _check_index('from_index', from_index, len(ids))
        return {}
    return sequential_orders(move(ids, from_index, to_index))


def changed_orders(current, proposed):
    """Keep only the entries of ``proposed`` that differ from ``current``."""
    return {
        link_id: order
        for link_id, order in proposed.items()
        if current.get(link_id) != order
    }


def insertion_order(existing_orders):
    """Order value for a new link: strictly below every existing one."""
    existing_orders = list(existing_orders)
    if not existing_orders:
        return 0
    return min(existing_orders) - 1


def resolve_drop(ids, active_id, over_id):
    """Translate a drag gesture into ``(moved_id, from_index, to_index)``.

    ``active_id`` is the dragged link and ``over_id`` the link it was
    dropped on. Returns None for a drop outside the list or onto itself.
    """
    if over_id is None or active_id == over_id:
        return None
    ids = list(ids)
    if active_id not in ids or over_id not in ids:
        return None
    return active_id, ids.index(active_id), ids.index(over_id)
