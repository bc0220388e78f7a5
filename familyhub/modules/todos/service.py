from fastapi import status
from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.todos.schemas import (
    TodoCreate, TodoUpdate, TodoResponse, ProjectCreate, ProjectUpdate, ProjectResponse,
    DEFAULT_PROJECT_COLOR, category_to_type, type_to_category, priority_to_int
)
from familyhub.core.access import AccessGateway
from familyhub.core.errors import (
    Forbidden, NotFound, ValidationFailed, StorageFailure, storage_failure, is_missing_relation
)
from familyhub.core.schemas import normalize_group_id, utc_now
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)

MISSING_TASKS_TABLE = "Tasks table does not exist. Please create the tasks table in your database."
# Tables whose rows may point at a project
PROJECT_DEPENDENTS = ("tasks", "timetracker_entries")


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


class TodoService:
    """
    Tasks and projects in either scope.

    Personal items have group_id NULL and belong to their creator; group
    items are visible to and editable by every active member of the group.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.gateway = AccessGateway(supabase)

    # Tasks

    def list_todos(self, identity: Dict[str, Any], group_id: Optional[str], category: Optional[str]) -> List[TodoResponse]:
        group_id = normalize_group_id(group_id)
        self.gateway.authorize_scope(identity, group_id)

        query = self.supabase.table("tasks").select("*")
        if group_id:
            query = query.eq("group_id", group_id)
        else:
            query = query.eq("user_id", identity["id"]).is_("group_id", "null")
        if category and category != "all":
            query = query.eq("type", category_to_type(category))

        try:
            result = query.order("created_at", desc=True).execute()
        except APIError as e:
            if is_missing_relation(e):
                logger.warning("tasks table missing, returning empty list")
                return []
            raise storage_failure(e, "Failed to list todos")
        return [TodoResponse.from_row(row) for row in result.data or []]

    def _check_project(self, identity: Dict[str, Any], project_id: str) -> None:
        try:
            self.gateway.authorize_record(
                identity, "projects", project_id, "Project", user_column="user_id"
            )
        except (NotFound, Forbidden):
            raise Forbidden("Forbidden: Project not found or access denied")

    def create_todo(self, identity: Dict[str, Any], data: TodoCreate) -> TodoResponse:
        group_id = normalize_group_id(data.group_id)
        if data.category == "group" and not group_id:
            raise ValidationFailed("groupId is required for group todos")
        self.gateway.authorize_scope(identity, group_id)
        if data.project_id:
            self._check_project(identity, data.project_id)

        now = utc_now().isoformat()
        row = {
            "title": data.title,
            "text": data.title,
            "description": data.description or None,
            "type": category_to_type(data.category or "personal"),
            "priority": priority_to_int(data.priority or "medium"),
            "completed": data.completed,
            "completed_at": now if data.completed else None,
            "user_id": identity["id"],
            "group_id": group_id,
            "project_id": data.project_id or None,
            "due_date": _iso(data.due_date),
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("tasks").insert(row).execute()
        except APIError as e:
            if is_missing_relation(e):
                raise StorageFailure(MISSING_TASKS_TABLE, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
            raise storage_failure(e, "Failed to create todo")
        return TodoResponse.from_row(result.data[0])

    def authorize_todo(self, identity: Dict[str, Any], todo_id: str) -> Dict[str, Any]:
        return self.gateway.authorize_record(identity, "tasks", todo_id, "Todo", user_column="user_id")

    def _write(self, todo_id: str, updates: Dict[str, Any]) -> TodoResponse:
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table("tasks")\
                .update(updates)\
                .eq("id", todo_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update todo {todo_id}")
        if not result.data:
            raise NotFound("Todo not found")
        return TodoResponse.from_row(result.data[0])

    def update_todo(self, identity: Dict[str, Any], todo_id: str, data: TodoUpdate) -> TodoResponse:
        existing = self.authorize_todo(identity, todo_id)
        sent = data.model_fields_set
        updates: Dict[str, Any] = {}

        if "title" in sent and data.title:
            updates["title"] = data.title
            updates["text"] = data.title
        if "description" in sent:
            updates["description"] = data.description or None
        if "category" in sent and data.category is not None:
            updates["type"] = category_to_type(data.category)
        if "priority" in sent:
            updates["priority"] = priority_to_int(data.priority)
        if "completed" in sent and data.completed is not None:
            updates["completed"] = data.completed
            updates["completed_at"] = utc_now().isoformat() if data.completed else None
        if "due_date" in sent:
            updates["due_date"] = _iso(data.due_date)
        if "project_id" in sent:
            if data.project_id:
                self._check_project(identity, data.project_id)
            updates["project_id"] = data.project_id or None

        new_category = data.category or type_to_category(existing.get("type"))
        new_group_id = normalize_group_id(data.group_id) if "group_id" in sent else existing.get("group_id")
        if new_category == "group" and not new_group_id:
            raise ValidationFailed("groupId is required for group todos")
        if "group_id" in sent:
            self.gateway.authorize_scope(identity, new_group_id)
            updates["group_id"] = new_group_id

        return self._write(todo_id, updates)

    def toggle_todo(self, identity: Dict[str, Any], todo_id: str) -> TodoResponse:
        """Flip completed; completed_at is set on completion and cleared on reopen"""
        existing = self.authorize_todo(identity, todo_id)
        completed = not existing.get("completed")
        return self._write(todo_id, {
            "completed": completed,
            "completed_at": utc_now().isoformat() if completed else None,
        })

    def delete_todo(self, identity: Dict[str, Any], todo_id: str) -> None:
        self.authorize_todo(identity, todo_id)
        try:
            self.supabase.table("tasks").delete().eq("id", todo_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete todo {todo_id}")

    # Projects

    def list_projects(self, identity: Dict[str, Any], group_id: Optional[str]) -> List[ProjectResponse]:
        group_id = normalize_group_id(group_id)
        self.gateway.authorize_scope(identity, group_id)

        query = self.supabase.table("projects").select("*")
        if group_id:
            query = query.eq("group_id", group_id)
        else:
            query = query.eq("user_id", identity["id"]).is_("group_id", "null")
        try:
            result = query.order("created_at", desc=True).execute()
        except APIError as e:
            if is_missing_relation(e):
                logger.warning("projects table missing, returning empty list")
                return []
            raise storage_failure(e, "Failed to list projects")
        return [ProjectResponse(**row) for row in result.data or []]

    def create_project(self, identity: Dict[str, Any], data: ProjectCreate) -> ProjectResponse:
        group_id = normalize_group_id(data.group_id)
        self.gateway.authorize_scope(identity, group_id)

        now = utc_now().isoformat()
        row = {
            "name": data.name,
            "description": data.description or None,
            "color": data.color or DEFAULT_PROJECT_COLOR,
            "user_id": identity["id"],
            "group_id": group_id,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("projects").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, "Failed to create project")
        return ProjectResponse(**result.data[0])

    def update_project(self, identity: Dict[str, Any], project_id: str, data: ProjectUpdate) -> ProjectResponse:
        self.gateway.authorize_record(identity, "projects", project_id, "Project", user_column="user_id")
        updates = data.to_row()
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table("projects")\
                .update(updates)\
                .eq("id", project_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update project {project_id}")
        if not result.data:
            raise NotFound("Project not found")
        return ProjectResponse(**result.data[0])

    def _detach_from_project(self, table: str, project_id: str) -> None:
        try:
            self.supabase.table(table)\
                .update({"project_id": None})\
                .eq("project_id", project_id)\
                .execute()
        except APIError as e:
            if not is_missing_relation(e):
                raise storage_failure(e, f"Failed to detach {table} from project {project_id}")

    def delete_project(self, identity: Dict[str, Any], project_id: str) -> None:
        """Delete a project; its tasks and time entries are kept and detached"""
        self.gateway.authorize_record(identity, "projects", project_id, "Project", user_column="user_id")
        for table in PROJECT_DEPENDENTS:
            self._detach_from_project(table, project_id)
        try:
            self.supabase.table("projects").delete().eq("id", project_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete project {project_id}")
