import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import urlparse

from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


@dataclass
class FileMeta:
    name: str
    url: str
    mime_type: str
    original_name: str


def storage_key_from_url(url):
    """Recover the storage key of an uploaded blob from its public URL."""
    if not url:
        return None
    filename = PurePosixPath(urlparse(url).path).name
    if not filename:
        return None
    return f"{settings.UPLOAD_PREFIX}/{filename}"


class BlobStore:
    """
    Thin wrapper over a Django storage backend. Uploaded files are stored
    under ``UPLOAD_PREFIX`` with a random name so the key can always be
    rebuilt from the URL.
    """

    def __init__(self, storage=None):
        self._storage = storage

    @property
    def storage(self):
        return self._storage or default_storage

    def upload(self, uploaded_file):
        original_name = getattr(uploaded_file, 'name', '') or 'upload'
        mime_type = (
            getattr(uploaded_file, 'content_type', None)
            or mimetypes.guess_type(original_name)[0]
            or 'application/octet-stream'
        )
        suffix = PurePosixPath(original_name).suffix.lower()
        key = f"{settings.UPLOAD_PREFIX}/{uuid.uuid4().hex}{suffix}"

        saved_key = self.storage.save(key, uploaded_file)
        url = self.storage.url(saved_key)
        if not url.startswith("http"):
            url = f"{settings.BACKEND_BASE_URL}{url}"

        logger.info(f"Uploaded {original_name} as {saved_key}")
        return FileMeta(name=PurePosixPath(saved_key).name, url=url, mime_type=mime_type, original_name=original_name)

    def delete(self, key):
        if not key:
            return
        self.storage.delete(key)
        logger.info(f"Deleted blob {key}")

    def delete_url(self, url):
        self.delete(storage_key_from_url(url))

    def delete_urls(self, urls):
        for url in urls:
            self.delete_url(url)


blob_store = BlobStore()
