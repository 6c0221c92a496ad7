"""In-memory ordered link list for one owner.

Every mutation is applied to the local list first and persisted second.
Persistence failures are logged and leave the local state as it is. The
unsaved fields are tracked per link, and ``dirty`` lists every link that
still has one, so callers can show that the store has drifted.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from openlink.errors import NotFoundError, PersistenceError, ValidationError
from openlink.services import ordering

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'target_url')


@dataclass
class LinkRecord:
    id: str
    profile_id: str
    title: str = ''
    target_url: str = ''
    order: int = 0
    is_active: bool = False
    icon: str | None = None
    created_at: datetime | None = None


class LinkListController:

    def __init__(self, owner_id, store, links=()):
        self.owner_id = owner_id
        self.store = store
        self._links = [replace(link) for link in links]
        # Last values known to be in the store, used for no-op suppression
        self._persisted = {link.id: replace(link) for link in links}
        # link id -> fields whose last write failed; "deleted" for a failed delete
        self._unsaved = {}

    @classmethod
    def load(cls, owner_id, store):
        """Start a session from the store's current snapshot."""
        return cls(owner_id, store, store.list(owner_id))

    @property
    def links(self):
        return list(self._links)

    @property
    def dirty(self):
        return {link_id for link_id, fields in self._unsaved.items() if fields}

    @property
    def ids(self):
        return [link.id for link in self._links]

    def get(self, link_id):
        for link in self._links:
            if link.id == link_id:
                return link
        raise NotFoundError('Link not found')

    def add(self):
        """Create an empty inactive link and put it first.

        Raises CreationError when the owner has no profile. Nothing is
        changed locally unless the store returns the new link.
        """
        link = replace(self.store.create(self.owner_id))
        self._links.insert(0, link)
        self._persisted[link.id] = replace(link)
        logger.info('Created link %s for %s', link.id, self.owner_id)
        return link

    def edit(self, link_id, field, value):
        """Change title or target_url locally; nothing is written until commit()."""
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f'{field} is not editable')
        link = self.get(link_id)
        setattr(link, field, value if value is not None else '')
        return link

    def commit(self, link_id):
        """Persist edited fields that differ from the last persisted values.

        Returns True when a write was issued.
        """
        link = self.get(link_id)
        persisted = self._persisted.get(link_id)
        fields = {
            field: getattr(link, field)
            for field in EDITABLE_FIELDS
            if persisted is None or getattr(link, field) != getattr(persisted, field)
        }
        if not fields:
            return False
        self._persist(link_id, fields)
        return True

    def toggle(self, link_id, is_active):
        link = self.get(link_id)
        link.is_active = bool(is_active)
        self._persist(link_id, {'is_active': link.is_active})
        return link

    def delete(self, link_id):
        """Drop the link locally, then ask the store to delete it.

        A failed delete is not reconciled: the link stays gone locally.
        """
        link = self.get(link_id)
        self._links.remove(link)
        try:
            self.store.delete(link_id)
        except PersistenceError:
            logger.warning('Could not delete link %s; removed locally only', link_id, exc_info=True)
            self._unsaved.setdefault(link_id, set()).add('deleted')
            return False
        self._persisted.pop(link_id, None)
        self._unsaved.pop(link_id, None)
        return True

    def reorder(self, moved_id, from_index, to_index):
        """Move one link and renumber the list.

        Issues one store write per link whose order value changed and
        returns the number of writes. Moving a link onto its own position
        writes nothing. No transaction spans the writes.
        """
        ids = self.ids
        proposed = ordering.reorder(ids, from_index, to_index)
        if not proposed:
            return 0
        if ids[from_index] != moved_id:
            raise ValidationError('Link order is out of date, reload and try again')

        by_id = {link.id: link for link in self._links}
        self._links = [by_id[link_id] for link_id in sorted(proposed, key=proposed.get)]
        for link in self._links:
            link.order = proposed[link.id]

        known = {link_id: link.order for link_id, link in self._persisted.items()}
        writes = ordering.changed_orders(known, proposed)
        for link_id, order in writes.items():
            self._persist(link_id, {'order': order})
        return len(writes)

    def _persist(self, link_id, fields):
        try:
            self.store.update(link_id, fields)
        except PersistenceError:
            logger.warning(
                'Could not save %s for link %s; keeping local state',
                ', '.join(sorted(fields)), link_id, exc_info=True,
            )
            self._unsaved.setdefault(link_id, set()).update(fields)
            return False

        persisted = self._persisted.get(link_id)
        if persisted is not None:
            for field, value in fields.items():
                setattr(persisted, field, value)
        remaining = self._unsaved.get(link_id, set()) - set(fields)
        if remaining:
            self._unsaved[link_id] = remaining
        else:
            self._unsaved.pop(link_id, None)
        return True
