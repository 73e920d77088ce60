"""
Storage Service
Image uploads to the Supabase storage bucket

Uploads are validated before they leave the process: only image/* content
types and at most MAX_UPLOAD_BYTES. Files are stored under
``<folder>/<timestamp>_<name>`` and exposed through their public URL.
"""
import logging
import re
import time
from typing import Optional

from supermall.core.config import settings
from supermall.core.database import get_supabase
from supermall.core.errors import ValidationError
from supermall.core.logging_config import log_action

logger = logging.getLogger(__name__)

SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def validate_image(content_type: Optional[str], size: int, max_bytes: Optional[int] = None) -> None:
    """
    Raises:
        ValidationError: If the file is not an image or is too large
    """
    max_bytes = settings.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")
    if size > max_bytes:
        raise ValidationError(f"Image must be at most {max_bytes // (1024 * 1024)}MB")


class StorageService:
    """Thin wrapper over the storage bucket"""

    def __init__(self, client=None, bucket: Optional[str] = None):
        self._client = client
        self.bucket = bucket or settings.STORAGE_BUCKET

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def upload_image(self, folder: str, filename: str, content: bytes, content_type: Optional[str]) -> str:
        """
        Validate and upload an image

        Returns:
            Public URL of the uploaded file
        """
        validate_image(content_type, len(content))

        safe_name = SAFE_NAME_RE.sub("_", filename or "image")
        path = f"{folder}/{int(time.time() * 1000)}_{safe_name}"

        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(path, content, {"content-type": content_type})
        url = bucket.get_public_url(path)

        log_action("Image uploaded", path=path, size=len(content))
        return url

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        """Object path inside the bucket for one of its public URLs"""
        marker = f"/{self.bucket}/"
        if not url or marker not in url:
            return None
        return url.split(marker, 1)[1].split("?", 1)[0]

    def delete_file(self, path: str) -> bool:
        """
        Remove a file from the bucket

        Failures are logged and reported as False.
        """
        try:
            self.client.storage.from_(self.bucket).remove([path])
            log_action("File deleted", path=path)
            return True
        except Exception as e:
            logger.warning(f"Could not delete {path}: {e}")
            return False
