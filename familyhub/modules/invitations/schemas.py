from pydantic import EmailStr, Field
from typing import Optional, List
from datetime import datetime
from familyhub.core.schemas import CamelModel


class InvitationCreate(CamelModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1)


class InvitationResponse(CamelModel):
    id: str
    group_id: str
    group_name: Optional[str] = None
    invited_by_user_id: Optional[str] = None
    email: str
    full_name: Optional[str] = None
    short_code: Optional[str] = None
    status: str
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class InvitationListResponse(CamelModel):
    invitations: List[InvitationResponse]


class InvitationCreateResponse(CamelModel):
    invitation: InvitationResponse
    registration_link: str


class InvitationSummary(CamelModel):
    """What an invitee may see before signing in"""
    id: str
    email: str
    full_name: Optional[str] = None
    group_name: Optional[str] = None
    expires_at: datetime
    status: str


class InvitationValidateResponse(CamelModel):
    invitation: InvitationSummary


class InvitationAcceptResponse(CamelModel):
    group_id: str
    role: str
    status: str
