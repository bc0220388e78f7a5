from pydantic import Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from familyhub.core.schemas import CamelModel, reject_null, parse_timestamp


class TimeEntryCreate(CamelModel):
    project_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    description: Optional[str] = None
    group_id: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value):
        return parse_timestamp(value)


class TimeEntryImport(CamelModel):
    """Entries are validated one by one so a failure can name its position"""
    group_id: Optional[str] = None
    entries: List[Dict[str, Any]] = Field(..., min_length=1)


class TimeEntryUpdate(CamelModel):
    project_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value):
        return parse_timestamp(value)

    @field_validator("is_active")
    @classmethod
    def _is_active_not_null(cls, value):
        return reject_null(value)


class EntryProject(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None


class TimeEntryResponse(CamelModel):
    id: str
    project_id: Optional[str] = None
    project: Optional[EntryProject] = None
    user_id: str
    group_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
