from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.taskplanner.schemas import PlannerGoalCreate, PlannerGoalUpdate, PlannerGoalResponse
from familyhub.modules.taskplanner.service import PlannerGoalService
from familyhub.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/taskplanner/goals", tags=["taskplanner"])


def get_planner_goal_service(supabase: Client = Depends(get_supabase)) -> PlannerGoalService:
    return PlannerGoalService(supabase)


@router.get("", response_model=List[PlannerGoalResponse])
def list_goals(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    service: PlannerGoalService = Depends(get_planner_goal_service)
):
    """The caller's own goals, personal or in the given group"""
    return service.list_goals(current_user, group_id)


@router.post("", response_model=PlannerGoalResponse, status_code=201)
def create_goal(
    data: PlannerGoalCreate,
    current_user: Dict = Depends(get_current_user),
    service: PlannerGoalService = Depends(get_planner_goal_service)
):
    return service.create_goal(current_user, data)


@router.patch("/{goal_id}", response_model=PlannerGoalResponse)
def update_goal(
    goal_id: str,
    data: PlannerGoalUpdate,
    current_user: Dict = Depends(get_current_user),
    service: PlannerGoalService = Depends(get_planner_goal_service)
):
    return service.update_goal(current_user, goal_id, data)


@router.delete("/{goal_id}", status_code=204)
def delete_goal(
    goal_id: str,
    current_user: Dict = Depends(get_current_user),
    service: PlannerGoalService = Depends(get_planner_goal_service)
):
    service.delete_goal(current_user, goal_id)
    return None
