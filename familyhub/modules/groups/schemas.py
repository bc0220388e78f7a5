from pydantic import Field
from typing import Optional, List, Dict, Literal
from datetime import datetime
from familyhub.core.schemas import CamelModel

Privacy = Literal["public", "private", "invite-only"]


class GroupCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    avatar: Optional[str] = None
    privacy: Privacy = "private"


class GroupUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    avatar: Optional[str] = None
    privacy: Optional[Privacy] = None
    enabled_modules: Optional[Dict[str, bool]] = None


class GroupResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    avatar: Optional[str] = None
    created_by: str
    created_at: datetime
    privacy: Optional[str] = None
    enabled_modules: Optional[Dict[str, bool]] = None
    members: List[dict] = []


class GroupMemberResponse(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    status: str
    join_date: Optional[datetime] = None


class MembershipResponse(CamelModel):
    role: str
    is_admin: bool
    is_active: bool
