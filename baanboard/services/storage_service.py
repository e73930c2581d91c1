"""Storage service for uploaded images.

Local disk behind a StorageBackend protocol, so a hosted blob store can replace it.
Files are organized by user: users/{user_id}/{folder}/{filename}
"""
import uuid
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile

from baanboard.core.config import settings
from baanboard.core.errors import ValidationError

IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp"}

EXT_MAP = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


class StorageBackend(Protocol):
    def save(self, user_id: str, folder: str, data: bytes, ext: str) -> str:
        """Save file and return public URL."""
        ...

    def delete(self, url: str) -> bool:
        """Delete file by URL. Returns True if deleted."""
        ...


class LocalStorage:
    """Store files on local disk. Path: uploads/users/{user_id}/{folder}/{uuid}.{ext}"""

    def __init__(self, base_dir: str | None = None, base_url: str | None = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR).resolve()
        self.base_url = (base_url or settings.MEDIA_BASE_URL).rstrip("/")

    def _user_path(self, user_id: str, folder: str) -> Path:
        path = self.base_dir / "users" / str(user_id) / folder
        path.mkdir(parents=True, exist_ok=True)
        return path

    def save(self, user_id: str, folder: str, data: bytes, ext: str) -> str:
        path = self._user_path(user_id, folder)
        filename = f"{uuid.uuid4().hex}{ext}"
        (path / filename).write_bytes(data)
        rel = f"users/{user_id}/{folder}/{filename}"
        return f"{self.base_url}/uploads/{rel}"

    def delete(self, url: str) -> bool:
        if "/uploads/" not in url:
            return False
        rel = url.split("/uploads/", 1)[1]
        filepath = (self.base_dir / rel).resolve()
        # Never follow a crafted URL outside the upload root.
        if self.base_dir not in filepath.parents:
            return False
        if filepath.is_file():
            filepath.unlink()
            return True
        return False


_storage: StorageBackend | None = None


def get_storage() -> StorageBackend:
    global _storage
    if _storage is None:
        _storage = LocalStorage()
    return _storage


async def save_image(file: UploadFile | None, user_id, folder: str) -> str | None:
    """Validate and store an optional uploaded image. Returns its URL, or None if no file was sent."""
    if file is None or not file.filename:
        return None
    content_type = file.content_type or ""
    if content_type not in IMAGE_TYPES:
        raise ValidationError(f"Invalid file type: {content_type}. Allowed: jpg, png, webp")
    data = await file.read()
    if len(data) > settings.MAX_IMAGE_SIZE_MB * 1024 * 1024:
        raise ValidationError(f"File too large. Max {settings.MAX_IMAGE_SIZE_MB}MB")
    return get_storage().save(str(user_id), folder, data, EXT_MAP[content_type])
