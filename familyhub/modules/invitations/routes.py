from fastapi import APIRouter, Depends
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.invitations.schemas import (
    InvitationCreate, InvitationListResponse, InvitationCreateResponse,
    InvitationValidateResponse, InvitationAcceptResponse
)
from familyhub.modules.invitations.service import InvitationService
from familyhub.core.access import AccessGateway
from familyhub.core.dependencies import get_current_user, get_access_gateway
from supabase import Client
from typing import Dict

router = APIRouter(tags=["invitations"])


def get_invitation_service(supabase: Client = Depends(get_supabase)) -> InvitationService:
    return InvitationService(supabase)


@router.get("/groups/{group_id}/invitations", response_model=InvitationListResponse)
def list_invitations(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InvitationService = Depends(get_invitation_service)
):
    """All invitations of the group, newest first (admins only)"""
    gateway.authorize_admin_action(current_user, group_id)
    return InvitationListResponse(invitations=service.list_invitations(group_id))


@router.post("/groups/{group_id}/invitations", response_model=InvitationCreateResponse, status_code=201)
def create_invitation(
    group_id: str,
    invitation_data: InvitationCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InvitationService = Depends(get_invitation_service)
):
    gateway.authorize_admin_action(current_user, group_id)
    return service.create_invitation(group_id, invitation_data, current_user["id"])


@router.get("/invitations/validate/{token}", response_model=InvitationValidateResponse)
def validate_invitation(
    token: str,
    service: InvitationService = Depends(get_invitation_service)
):
    """Check a short code or invite token; no sign-in required"""
    return InvitationValidateResponse(invitation=service.validate(token))


@router.post("/invitations/{token}/accept", response_model=InvitationAcceptResponse)
def accept_invitation(
    token: str,
    current_user: Dict = Depends(get_current_user),
    service: InvitationService = Depends(get_invitation_service)
):
    return service.accept_invitation(token, current_user["id"])
