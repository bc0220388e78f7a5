from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from familyhub.core.schemas import CamelModel, reject_null


def _stripped(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class FolderCreate(CamelModel):
    name: str
    group_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value):
        return _stripped(value)


class FolderUpdate(CamelModel):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _clean_name(cls, value):
        return _stripped(reject_null(value))


class FolderResponse(CamelModel):
    id: str
    name: str
    user_id: str
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NoteCreate(CamelModel):
    title: str
    content: Optional[str] = None
    folder_id: Optional[str] = None
    group_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _clean_title(cls, value):
        return _stripped(value)


class NoteUpdate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    folder_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _clean_title(cls, value):
        return _stripped(reject_null(value))

    @field_validator("content")
    @classmethod
    def _content_not_null(cls, value):
        return reject_null(value)


class NoteResponse(CamelModel):
    id: str
    title: str
    content: str = ""
    folder_id: Optional[str] = None
    user_id: str
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExtractedTask(CamelModel):
    """A task suggested from a note; dates are YYYY-MM-DD, times HH:MM"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    date: Optional[str] = None
    end_date: Optional[str] = None
    time: Optional[str] = None
    end_time: Optional[str] = None
    type: Optional[str] = "personal"
    priority: Optional[str] = "medium"
    is_recurring: Optional[bool] = False
    recurrence_pattern: Optional[str] = None
    recurrence_interval: Optional[int] = None


class ExtractedTasksResponse(CamelModel):
    tasks: List[ExtractedTask] = []
