from datetime import datetime, timezone
from openlink.extensions import db


BUTTON_STYLES = ('solid', 'outline', 'rounded')


class Profile(db.Model):
    __tablename__ = 'profiles'

    id = db.Column(db.String(36), primary_key=True)  # Supabase auth.users UUID
    username = db.Column(db.String(30), unique=True, nullable=True)
    display_name = db.Column(db.String(100), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    avatar_url = db.Column(db.String(500), nullable=True)
    background_color = db.Column(db.String(20), nullable=True)
    accent_color = db.Column(db.String(20), nullable=True)
    button_style = db.Column(db.String(10), default='solid')
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def has_username(self):
        return bool(self.username and self.username.strip())
