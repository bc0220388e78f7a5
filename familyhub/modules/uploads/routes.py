from fastapi import APIRouter, Depends, File, Form, UploadFile
from familyhub.integrations.cloudinary_storage import MediaStorage, get_media_storage
from familyhub.modules.uploads.schemas import UploadResponse
from familyhub.modules.uploads.service import UploadService
from familyhub.core.dependencies import get_current_user
from typing import Dict, Optional

router = APIRouter(tags=["uploads"])


def get_upload_service(storage: MediaStorage = Depends(get_media_storage)) -> UploadService:
    return UploadService(storage)


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: UploadFile = File(...),
    folder: Optional[str] = Form(None),
    current_user: Dict = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service)
):
    """Upload an image or video (10MB max) to media storage"""
    # One byte past the limit is enough to reject an oversized file
    content = file.file.read(service.max_bytes + 1)
    media = service.upload(content, file.filename, file.content_type, folder or "uploads")
    return UploadResponse(data=media)
