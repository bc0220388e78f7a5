from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from familyhub.core.schemas import CamelModel, reject_null


class PlantCreate(CamelModel):
    group_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    common_name: Optional[str] = None
    location: Optional[str] = None
    recommended_water_schedule: Optional[str] = None
    water_amount: Optional[str] = None
    last_watered: Optional[datetime] = None


class PlantUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    common_name: Optional[str] = None
    location: Optional[str] = None
    recommended_water_schedule: Optional[str] = None
    water_amount: Optional[str] = None
    last_watered: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, value):
        return reject_null(value)


class PlantResponse(CamelModel):
    id: str
    group_id: str
    user_id: Optional[str] = None
    name: str
    common_name: Optional[str] = None
    location: Optional[str] = None
    recommended_water_schedule: Optional[str] = None
    water_amount: Optional[str] = None
    last_watered: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlantIdentifyRequest(CamelModel):
    image_base64: str = Field(..., min_length=1)


class PlantIdentification(CamelModel):
    common_name: str
    recommended_water_schedule: Optional[str] = None
    water_amount: Optional[str] = None
    confidence: Optional[str] = None


class PlantPhotoCreate(CamelModel):
    image_url: str = Field(..., min_length=1)
    photo_date: Optional[datetime] = None


class PlantPhotoResponse(CamelModel):
    id: str
    plant_id: str
    image_url: str
    photo_date: datetime
    created_at: Optional[datetime] = None
