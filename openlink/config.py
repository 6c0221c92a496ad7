import os
from dotenv import load_dotenv

load_dotenv()

def _fix_db_url(url):
    """Fix common DATABASE_URL issues for SQLAlchemy compatibility."""
    if not url:
        return 'sqlite:///openlink.db'
    # Supabase/Heroku use postgres:// but SQLAlchemy requires postgresql://
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url

class Config:
    SQLALCHEMY_DATABASE_URI = _fix_db_url(os.environ.get('DATABASE_URL', ''))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
    SUPABASE_PUBLISHABLE_KEY = os.environ.get('SUPABASE_PUBLISHABLE_KEY', '')
    # Optional; when empty, uploads use the caller's own access token (RLS applies)
    SUPABASE_SERVICE_KEY = os.environ.get('SUPABASE_SERVICE_KEY', '')

    SITE_NAME = os.environ.get('SITE_NAME', 'OpenLink')
    DEFAULT_OG_IMAGE = os.environ.get('DEFAULT_OG_IMAGE', 'https://example.com/default-og.png')

    RESERVED_USERNAMES = frozenset([
        'admin', 'login', 'onboarding', 'api', 'auth',
        'settings', 'help', 'support', 'about',
    ])

    # Appearance defaults
    DEFAULT_BACKGROUND_COLOR = '#f3f4f6'
    DEFAULT_ACCENT_COLOR = '#09090b'

    # Avatar storage
    AVATAR_BUCKET = os.environ.get('AVATAR_BUCKET', 'avatars')
    AVATAR_MAX_BYTES = int(os.environ.get('AVATAR_MAX_BYTES', str(2 * 1024 * 1024)))
    STORAGE_REQUEST_TIMEOUT = int(os.environ.get('STORAGE_REQUEST_TIMEOUT', '15'))

class DevConfig(Config):
    DEBUG = True

class ProdConfig(Config):
    DEBUG = False

class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SUPABASE_URL = 'https://project.supabase.co'
