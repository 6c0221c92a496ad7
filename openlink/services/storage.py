"""Avatar uploads to Supabase Storage over its REST API."""

import logging
import os
import uuid

import requests

from openlink.errors import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}


class AvatarStorage:

    def __init__(self, supabase_url, api_key, bucket='avatars', timeout=15):
        self.base_url = supabase_url.rstrip('/')
        self.api_key = api_key
        self.bucket = bucket
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            config['SUPABASE_URL'],
            config['SUPABASE_PUBLISHABLE_KEY'],
            bucket=config['AVATAR_BUCKET'],
            timeout=config['STORAGE_REQUEST_TIMEOUT'],
        )

    def object_path(self, profile_id: str, filename: str) -> str:
        """``<profile_id>/<random>.<ext>``; the extension comes from the upload."""
        ext = os.path.splitext(filename or '')[1].lstrip('.').lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError('Avatar must be a PNG, JPEG, GIF or WebP image.')
        return f'{profile_id}/{uuid.uuid4().hex}.{ext}'

    def public_url(self, path: str) -> str:
        return f'{self.base_url}/storage/v1/object/public/{self.bucket}/{path}'

    def upload(self, profile_id, filename, data, content_type, access_token):
        """Upload avatar bytes and return their public URL."""
        path = self.object_path(profile_id, filename)
        url = f'{self.base_url}/storage/v1/object/{self.bucket}/{path}'
        headers = {
            'Authorization': f'Bearer {access_token}',
            'apikey': self.api_key,
            'Content-Type': content_type or 'application/octet-stream',
        }
        try:
            resp = requests.post(url, data=data, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error('Avatar upload failed for %s: %s', profile_id, e)
            raise PersistenceError(
                "Failed to upload image. Is the public 'avatars' storage bucket set up?"
            ) from e

        logger.info('Uploaded avatar %s', path)
        return self.public_url(path)
