from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.goals.schemas import GoalCreate, GoalUpdate, GoalResponse
from familyhub.modules.goals.service import GoalService
from familyhub.core.access import AccessGateway
from familyhub.core.dependencies import get_current_user, get_access_gateway
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/goals", tags=["goals"])


def get_goal_service(supabase: Client = Depends(get_supabase)) -> GoalService:
    return GoalService(supabase)


@router.get("", response_model=List[GoalResponse])
def list_goals(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GoalService = Depends(get_goal_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_goals(group_id)


@router.post("", response_model=GoalResponse, status_code=201)
def create_goal(
    data: GoalCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GoalService = Depends(get_goal_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    gateway.require_member(data.group_id, data.owner_id, "ownerId")
    return service.create_goal(data)


@router.patch("/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: str,
    data: GoalUpdate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GoalService = Depends(get_goal_service)
):
    """Update a goal; access follows the goal's group"""
    goal = gateway.authorize_record(current_user, "goals", goal_id, "Goal")
    if data.owner_id:
        gateway.require_member(goal["group_id"], data.owner_id, "ownerId")
    return service.update_goal(goal_id, data)


@router.delete("/{goal_id}", status_code=204)
def delete_goal(
    goal_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GoalService = Depends(get_goal_service)
):
    gateway.authorize_record(current_user, "goals", goal_id, "Goal")
    service.delete_goal(goal_id)
    return None
