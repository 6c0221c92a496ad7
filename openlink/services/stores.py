"""SQLAlchemy-backed stores for links, profiles and clicks.

Each write commits on its own. SQLAlchemy failures are rolled back and
surfaced as PersistenceError.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from openlink.errors import ConflictError, CreationError, PersistenceError
from openlink.extensions import db
from openlink.models import ClickEvent, Link, Profile
from openlink.services.link_list import LinkRecord
from openlink.services.ordering import insertion_order

logger = logging.getLogger(__name__)

LINK_FIELDS = ('title', 'target_url', 'order', 'is_active', 'icon')
PROFILE_FIELDS = (
    'username', 'display_name', 'bio', 'avatar_url',
    'background_color', 'accent_color', 'button_style',
)


def _to_record(link):
    return LinkRecord(
        id=link.id,
        profile_id=link.profile_id,
        title=link.title or '',
        target_url=link.target_url or '',
        order=link.order,
        is_active=bool(link.is_active),
        icon=link.icon,
        created_at=link.created_at,
    )


def _commit(action, conflict=None):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        if conflict and isinstance(e, IntegrityError):
            raise ConflictError(conflict) from e
        logger.error('Failed to %s: %s', action, e)
        raise PersistenceError(f'Failed to {action}') from e


class SqlLinkStore:

    def create(self, owner_id):
        profile = db.session.get(Profile, owner_id)
        if profile is None:
            raise CreationError('Profile not found')

        lowest = (
            db.session.query(func.min(Link.order))
            .filter(Link.profile_id == owner_id)
            .scalar()
        )
        link = Link(
            profile_id=owner_id,
            title='',
            target_url='',
            order=insertion_order([] if lowest is None else [lowest]),
            is_active=False,
        )
        db.session.add(link)
        _commit('create link')
        return _to_record(link)

    def update(self, link_id, fields):
        unknown = set(fields) - set(LINK_FIELDS)
        if unknown:
            raise ValueError(f'Unknown link fields: {sorted(unknown)}')
        link = db.session.get(Link, link_id)
        if link is None:
            raise PersistenceError('Failed to update link: link no longer exists')
        for field, value in fields.items():
            setattr(link, field, value)
        _commit('update link')

    def delete(self, link_id):
        link = db.session.get(Link, link_id)
        if link is None:
            return
        db.session.delete(link)
        _commit('delete link')

    def get(self, link_id):
        link = db.session.get(Link, link_id)
        return _to_record(link) if link else None

    def list(self, owner_id, active_only=False):
        """Links of one owner, ascending by order; newest first on ties."""
        query = Link.query.filter_by(profile_id=owner_id)
        if active_only:
            query = query.filter(Link.is_active.is_(True))
        query = query.order_by(Link.order.asc(), Link.created_at.desc())
        return [_to_record(link) for link in query.all()]


class SqlProfileStore:

    def get(self, profile_id):
        return db.session.get(Profile, profile_id)

    def find_by_username(self, username):
        return Profile.query.filter_by(username=username).first()

    def update(self, profile_id, fields):
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f'Unknown profile fields: {sorted(unknown)}')
        profile = db.session.get(Profile, profile_id)
        if profile is None:
            return None
        for field, value in fields.items():
            setattr(profile, field, value)
        _commit('update profile', conflict='This username is already taken.')
        return profile

    def insert(self, profile_id, fields):
        profile = Profile(id=profile_id, **fields)
        db.session.add(profile)
        _commit('create profile', conflict='This username is already taken.')
        return profile


class SqlClickStore:

    def append(self, link_id, device_class):
        db.session.add(ClickEvent(link_id=link_id, device_class=device_class))
        _commit('record click')

    def count_by_link(self, link_ids):
        if not link_ids:
            return {}
        rows = (
            db.session.query(ClickEvent.link_id, func.count(ClickEvent.id))
            .filter(ClickEvent.link_id.in_(link_ids))
            .group_by(ClickEvent.link_id)
            .all()
        )
        return {link_id: count for link_id, count in rows}

    def count_by_device(self, link_ids):
        if not link_ids:
            return {}
        rows = (
            db.session.query(ClickEvent.device_class, func.count(ClickEvent.id))
            .filter(ClickEvent.link_id.in_(link_ids))
            .group_by(ClickEvent.device_class)
            .all()
        )
        return {device: count for device, count in rows}
