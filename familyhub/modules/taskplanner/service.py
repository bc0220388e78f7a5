from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.taskplanner.schemas import (
    PlannerGoalCreate, PlannerGoalUpdate, PlannerGoalResponse,
    FAMILY_GOAL_TYPE, PERSONAL_GOAL_TYPE, DEFAULT_TIMEFRAME
)
from familyhub.core.access import AccessGateway
from familyhub.core.errors import NotFound, ValidationFailed, storage_failure, is_missing_relation
from familyhub.core.schemas import normalize_group_id, utc_now
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class PlannerGoalService:
    """
    The task planner's goals: a text and a progress figure per goal, stored
    in the goals table. Callers only ever see the goals they created.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.gateway = AccessGateway(supabase)

    def list_goals(self, identity: Dict[str, Any], group_id: Optional[str]) -> List[PlannerGoalResponse]:
        group_id = normalize_group_id(group_id)
        self.gateway.authorize_scope(identity, group_id)

        query = self.supabase.table("goals").select("*").eq("user_id", identity["id"])
        if group_id:
            query = query.eq("group_id", group_id)
        else:
            query = query.is_("group_id", "null")
        try:
            result = query.order("created_at", desc=True).execute()
        except APIError as e:
            if is_missing_relation(e):
                logger.warning("goals table missing, returning empty list")
                return []
            raise storage_failure(e, "Failed to list planner goals")
        return [PlannerGoalResponse.from_row(row) for row in result.data or []]

    def create_goal(self, identity: Dict[str, Any], data: PlannerGoalCreate) -> PlannerGoalResponse:
        text = data.goal_text
        if not text:
            raise ValidationFailed("Text or goal is required")
        group_id = normalize_group_id(data.group_id)
        self.gateway.authorize_scope(identity, group_id)

        now = utc_now().isoformat()
        row = {
            "text": text,
            "title": text,
            "description": "",
            "owner_id": identity["id"],
            "type": FAMILY_GOAL_TYPE if group_id else PERSONAL_GOAL_TYPE,
            "timeframe": DEFAULT_TIMEFRAME,
            "progress": data.progress,
            "user_id": identity["id"],
            "group_id": group_id,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("goals").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, "Failed to create planner goal")
        return PlannerGoalResponse.from_row(result.data[0])

    def authorize_goal(self, identity: Dict[str, Any], goal_id: str) -> Dict[str, Any]:
        return self.gateway.authorize_record(identity, "goals", goal_id, "Goal", user_column="user_id")

    def update_goal(self, identity: Dict[str, Any], goal_id: str, data: PlannerGoalUpdate) -> PlannerGoalResponse:
        self.authorize_goal(identity, goal_id)
        updates: Dict[str, Any] = {}
        text = (data.goal or data.text or "").strip()
        if text:
            updates["text"] = text
            updates["title"] = text
        if data.progress is not None:
            updates["progress"] = data.progress
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table("goals")\
                .update(updates)\
                .eq("id", goal_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update planner goal {goal_id}")
        if not result.data:
            raise NotFound("Goal not found")
        return PlannerGoalResponse.from_row(result.data[0])

    def delete_goal(self, identity: Dict[str, Any], goal_id: str) -> None:
        self.authorize_goal(identity, goal_id)
        try:
            self.supabase.table("goals").delete().eq("id", goal_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete planner goal {goal_id}")
