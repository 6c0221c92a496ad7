import uuid
from datetime import datetime, timezone
from openlink.extensions import db


DEVICE_CLASSES = ('mobile', 'desktop')


class ClickEvent(db.Model):
    __tablename__ = 'clicks'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    link_id = db.Column(db.String(36), db.ForeignKey('links.id', ondelete='CASCADE'), nullable=False)
    device_class = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.Index('ix_clicks_link', 'link_id'),
    )
