# media_catalog/services/storage.py
"""Local-disk storage for posters, covers and screenshots, served under /uploads"""
import os
import uuid
import logging
from typing import List, Optional
from fastapi import UploadFile, HTTPException

from ..config import settings

logger = logging.getLogger(__name__)

IMAGE_TYPES = ["image/jpeg", "image/png", "image/webp"]


class StorageService:
    def __init__(self, upload_dir: Optional[str] = None):
        self.upload_dir = upload_dir or settings.UPLOAD_DIR
        os.makedirs(self.upload_dir, exist_ok=True)

    async def upload_file(
        self,
        file: UploadFile,
        folder: str = "media",
        allowed_types: Optional[List[str]] = None
    ) -> str:
        """Save the upload and return its public URL"""
        content = await file.read()
        if len(content) > settings.MAX_FILE_SIZE:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max size: {settings.MAX_FILE_SIZE} bytes"
            )

        if allowed_types and file.content_type not in allowed_types:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid file type. Allowed: {allowed_types}"
            )

        # Unique name, original extension kept
        extension = os.path.splitext(file.filename or "")[1].lower()
        filename = f"{folder}/{uuid.uuid4().hex}{extension}"
        return self._upload_to_local(content, filename)

    def _upload_to_local(self, content: bytes, filename: str) -> str:
        file_path = os.path.join(self.upload_dir, filename)
        os.makedirs(os.path.dirname(file_path), exist_ok=True)

        with open(file_path, "wb") as f:
            f.write(content)

        logger.info(f"Stored upload at {file_path}")
        return f"/uploads/{filename}"

    def delete_file(self, file_url: str) -> bool:
        """Remove the file behind a /uploads URL; False if it was not there"""
        relative = file_url.replace("/uploads/", "", 1).lstrip("/")
        file_path = os.path.normpath(os.path.join(self.upload_dir, relative))
        if not file_path.startswith(os.path.normpath(self.upload_dir) + os.sep):
            logger.warning(f"Refusing to delete path outside upload dir: {file_url}")
            return False
        if not os.path.exists(file_path):
            return False
        try:
            os.remove(file_path)
        except OSError as e:
            logger.error(f"Failed to delete {file_path}: {e}")
            return False
        return True


def get_storage() -> StorageService:
    return StorageService()
