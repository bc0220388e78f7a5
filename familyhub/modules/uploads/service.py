from familyhub.config import settings
from familyhub.integrations.cloudinary_storage import MediaStorage
from familyhub.modules.uploads.schemas import UploadedMedia
from familyhub.core.errors import ValidationFailed
from typing import Optional
import base64
import logging
import re
import time

logger = logging.getLogger(__name__)

ALLOWED_MIME_PREFIXES = ("image/", "video/")


def sanitize_filename(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", filename)


def validate_upload(size: int, content_type: Optional[str], max_bytes: int) -> None:
    """Raise ValidationFailed unless the file is within the limit and an image or video."""
    if size > max_bytes:
        raise ValidationFailed(f"File size exceeds {max_bytes // (1024 * 1024)}MB limit")
    if not content_type or not content_type.startswith(ALLOWED_MIME_PREFIXES):
        raise ValidationFailed("Invalid file type. Only images and videos are allowed.")


class UploadService:
    def __init__(self, storage: MediaStorage, max_bytes: int = settings.upload_max_bytes):
        self.storage = storage
        self.max_bytes = max_bytes

    def upload(self, content: bytes, filename: str, content_type: Optional[str], folder: str) -> UploadedMedia:
        validate_upload(len(content), content_type, self.max_bytes)

        data_uri = f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"
        public_id = f"{int(time.time() * 1000)}-{sanitize_filename(filename or 'file')}"
        resource_type = "video" if content_type.startswith("video/") else "image"

        result = self.storage.upload(data_uri, folder=folder, public_id=public_id, resource_type=resource_type)
        logger.info(f"Uploaded {public_id} ({len(content)} bytes) to {folder}")
        return UploadedMedia(**result)
