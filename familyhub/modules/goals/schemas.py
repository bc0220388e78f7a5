from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
from familyhub.core.schemas import CamelModel, reject_null


class GoalCreate(CamelModel):
    group_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    owner_id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    timeframe: str = Field(..., min_length=1)
    description: Optional[str] = None
    progress: Optional[int] = Field(None, ge=0, le=100)


class GoalUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    owner_id: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    timeframe: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    progress: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("title", "owner_id", "type", "timeframe", "progress")
    @classmethod
    def _required_columns(cls, value):
        return reject_null(value)


class GoalResponse(CamelModel):
    id: str
    group_id: str
    title: str
    description: Optional[str] = ""
    owner_id: str
    type: str
    timeframe: str
    progress: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
