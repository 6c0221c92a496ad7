import uuid
from datetime import datetime, timezone
from openlink.extensions import db


class Link(db.Model):
    __tablename__ = 'links'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    profile_id = db.Column(db.String(36), db.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False)
    title = db.Column(db.String(200), nullable=True, default='')
    target_url = db.Column(db.String(2000), nullable=True, default='')
    order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    icon = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.Index('ix_links_profile_order', 'profile_id', 'order'),
    )
