import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from familyhub.config import settings
from familyhub.core.errors import ExternalServiceFailure, ServiceNotConfigured
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)


class MediaStorage:
    """Thin wrapper over cloudinary.uploader"""

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    def upload(self, data_uri: str, folder: str, public_id: str, resource_type: str = "image") -> Dict[str, Any]:
        try:
            result = cloudinary.uploader.upload(
                data_uri,
                folder=folder,
                public_id=public_id,
                resource_type=resource_type,
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload of {public_id} failed: {e}")
            raise ExternalServiceFailure(str(e) or "Upload failed")

        return {
            "public_id": result.get("public_id"),
            "url": result.get("secure_url"),
            "format": result.get("format"),
            "width": result.get("width"),
            "height": result.get("height"),
            "bytes": result.get("bytes"),
            "resource_type": result.get("resource_type", resource_type),
        }


def get_media_storage() -> MediaStorage:
    """FastAPI dependency; 503 until all three Cloudinary settings are present"""
    if not settings.cloudinary_configured:
        raise ServiceNotConfigured("File upload service is not configured. Please contact support.")
    return MediaStorage(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
    )
