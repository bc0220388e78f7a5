from pydantic import Field
from typing import Optional
from datetime import datetime
from familyhub.core.schemas import CamelModel


class CheckInCreate(CamelModel):
    group_id: str = Field(..., min_length=1)
    member_id: Optional[str] = None
    mood: str = Field(..., min_length=1)
    note: str = Field(..., min_length=1)
    location: Optional[str] = None
    question_id: Optional[str] = None


class CheckInResponse(CamelModel):
    id: str
    member_id: str
    group_id: str
    timestamp: Optional[datetime] = None
    mood: str
    note: str
    location: Optional[str] = None
    question_id: Optional[str] = None


class QuestionCreate(CamelModel):
    group_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    topic: str = Field(..., min_length=1)
    is_active: bool = True


class QuestionResponse(CamelModel):
    id: str
    text: str
    topic: str
    created_by: Optional[str] = None
    group_id: str
    timestamp: Optional[datetime] = None
    is_active: bool = True


class CheckInMember(CamelModel):
    id: str
    name: Optional[str] = None
    avatar: str = ""
    role: str  # Parent | Child
