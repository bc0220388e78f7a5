from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.goals.schemas import GoalCreate, GoalUpdate, GoalResponse
from familyhub.core.errors import NotFound, storage_failure
from familyhub.core.schemas import utc_now
from typing import List
import logging

logger = logging.getLogger(__name__)


class GoalService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_goals(self, group_id: str) -> List[GoalResponse]:
        try:
            result = self.supabase.table("goals")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list goals for {group_id}")
        return [GoalResponse(**row) for row in result.data or []]

    def create_goal(self, data: GoalCreate) -> GoalResponse:
        row = {
            "group_id": data.group_id,
            "title": data.title,
            "description": data.description or "",
            "owner_id": data.owner_id,
            "type": data.type,
            "timeframe": data.timeframe,
            "progress": data.progress or 0,
        }
        try:
            result = self.supabase.table("goals").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to create goal in {data.group_id}")
        logger.info(f"Goal {result.data[0]['id']} created in {data.group_id}")
        return GoalResponse(**result.data[0])

    def update_goal(self, goal_id: str, data: GoalUpdate) -> GoalResponse:
        updates = data.to_row()
        if "description" in updates:
            updates["description"] = updates["description"] or ""
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table("goals")\
                .update(updates)\
                .eq("id", goal_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update goal {goal_id}")
        if not result.data:
            raise NotFound("Goal not found")
        return GoalResponse(**result.data[0])

    def delete_goal(self, goal_id: str) -> None:
        try:
            self.supabase.table("goals").delete().eq("id", goal_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete goal {goal_id}")
