from fastapi import APIRouter, Depends
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupMemberResponse, MembershipResponse
)
from familyhub.modules.groups.service import GroupService
from familyhub.core.access import AccessGateway
from familyhub.core.dependencies import get_current_user, get_access_gateway
from familyhub.core.errors import NotFound
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


@router.get("", response_model=List[GroupResponse])
def list_groups(
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Groups the caller is an active member of"""
    return service.list_groups_for_user(current_user["id"])


@router.post("", response_model=GroupResponse, status_code=201)
def create_group(
    group_data: GroupCreate,
    current_user: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group; the caller becomes its Admin"""
    return service.create_group(group_data, current_user["id"])


@router.get("/{group_id}", response_model=GroupResponse)
def get_group(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroupService = Depends(get_group_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.get_group_by_id(group_id)


@router.patch("/{group_id}", response_model=GroupResponse)
def update_group(
    group_id: str,
    group_data: GroupUpdate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroupService = Depends(get_group_service)
):
    """Update group settings (admins only)"""
    gateway.authorize_admin_action(current_user, group_id)
    return service.update_group(group_id, group_data)


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
def list_members(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroupService = Depends(get_group_service)
):
    """Active members of the group (members only)"""
    gateway.authorize_group_access(current_user, group_id)
    return service.list_members(group_id)


@router.get("/{group_id}/members/me", response_model=MembershipResponse)
def get_my_membership(
    group_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway)
):
    membership = gateway.find_membership(current_user["id"], group_id)
    if not membership:
        raise NotFound("Not a member of this group")
    return GroupService.membership_info(membership)


@router.delete("/{group_id}/members/{user_id}", status_code=204)
def deactivate_member(
    group_id: str,
    user_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroupService = Depends(get_group_service)
):
    """Deactivate a membership (admins only); the row is kept for history"""
    gateway.authorize_admin_action(current_user, group_id)
    service.deactivate_member(group_id, user_id)
    return None
