from typing import Optional
from familyhub.core.schemas import CamelModel


class UploadedMedia(CamelModel):
    public_id: str
    url: str
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    bytes: Optional[int] = None
    resource_type: str


class UploadResponse(CamelModel):
    success: bool = True
    data: UploadedMedia
