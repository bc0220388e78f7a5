from fastapi import HTTPException, status
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client
from familyhub.modules.timetracker.schemas import (
    TimeEntryCreate, TimeEntryImport, TimeEntryUpdate, TimeEntryResponse
)
from familyhub.core.access import AccessGateway
from familyhub.core.errors import (
    Forbidden, NotFound, ValidationFailed, StorageFailure, storage_failure, is_missing_relation
)
from familyhub.core.schemas import normalize_group_id, utc_now, blank_to_none
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

MISSING_TABLES = "Time tracker tables do not exist. Please run the database migration."
PROJECT_COLUMNS = "id, name, description, color"


def duration_minutes(start: datetime, end: Optional[datetime]) -> Optional[int]:
    """Whole minutes from start to end; None while the entry is still running"""
    if end is None:
        return None
    if end <= start:
        raise ValidationFailed("End time must be after start time")
    return int((end - start).total_seconds() // 60)


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" if e["loc"] else e["msg"]
        for e in error.errors()
    )


class TimeTrackerService:
    """
    Time entries in either scope.

    Personal entries have group_id NULL and belong to whoever logged them;
    group entries are visible to every active member. Deleting an entry only
    marks it inactive.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.gateway = AccessGateway(supabase)

    def _check_project(self, identity: Dict[str, Any], project_id: str, group_id: Optional[str]) -> None:
        """The caller's own projects, or projects of the entry's group, may be used"""
        project = self.gateway.fetch_record("projects", project_id, "Project")
        if project.get("user_id") == identity["id"]:
            return
        if group_id and project.get("group_id") == group_id:
            return
        raise Forbidden("Forbidden: No access to this project")

    def _attach_projects(self, rows: List[Dict[str, Any]]) -> List[TimeEntryResponse]:
        project_ids = sorted({row["project_id"] for row in rows if row.get("project_id")})
        projects: Dict[str, Dict[str, Any]] = {}
        if project_ids:
            try:
                result = self.supabase.table("projects")\
                    .select(PROJECT_COLUMNS)\
                    .in_("id", project_ids)\
                    .execute()
                projects = {project["id"]: project for project in result.data or []}
            except APIError as e:
                if not is_missing_relation(e):
                    raise storage_failure(e, "Failed to load projects for time entries")
        return [
            TimeEntryResponse(**row, project=projects.get(row.get("project_id")))
            for row in rows
        ]

    def _new_row(self, identity: Dict[str, Any], data: TimeEntryCreate, group_id: Optional[str]) -> Dict[str, Any]:
        if data.project_id:
            self._check_project(identity, data.project_id, group_id)
        now = utc_now().isoformat()
        return {
            "project_id": data.project_id or None,
            "user_id": identity["id"],
            "group_id": group_id,
            "start_time": data.start_time.isoformat(),
            "end_time": data.end_time.isoformat() if data.end_time else None,
            "duration_minutes": duration_minutes(data.start_time, data.end_time),
            "description": blank_to_none(data.description),
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }

    def _insert(self, rows: List[Dict[str, Any]]) -> List[TimeEntryResponse]:
        try:
            result = self.supabase.table("timetracker_entries").insert(rows).execute()
        except APIError as e:
            if is_missing_relation(e):
                raise StorageFailure(MISSING_TABLES, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
            raise storage_failure(e, "Failed to create time entries")
        return self._attach_projects(result.data or [])

    def list_entries(
        self,
        identity: Dict[str, Any],
        group_id: Optional[str],
        project_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[TimeEntryResponse]:
        group_id = normalize_group_id(group_id)
        self.gateway.authorize_scope(identity, group_id)

        query = self.supabase.table("timetracker_entries").select("*").eq("is_active", True)
        if group_id:
            query = query.eq("group_id", group_id)
        else:
            query = query.eq("user_id", identity["id"]).is_("group_id", "null")
        if project_id:
            query = query.eq("project_id", project_id)
        if start_date:
            query = query.gte("start_time", start_date)
        if end_date:
            query = query.lte("start_time", end_date)

        try:
            result = query.order("start_time", desc=True).execute()
        except APIError as e:
            if is_missing_relation(e):
                logger.warning("timetracker_entries table missing, returning empty list")
                return []
            raise storage_failure(e, "Failed to list time entries")
        return self._attach_projects(result.data or [])

    def create_entry(self, identity: Dict[str, Any], data: TimeEntryCreate) -> TimeEntryResponse:
        group_id = normalize_group_id(data.group_id)
        self.gateway.authorize_scope(identity, group_id)
        return self._insert([self._new_row(identity, data, group_id)])[0]

    def import_entries(self, identity: Dict[str, Any], data: TimeEntryImport) -> List[TimeEntryResponse]:
        """All or nothing: the first invalid entry rejects the whole batch"""
        group_id = normalize_group_id(data.group_id)
        self.gateway.authorize_scope(identity, group_id)

        rows = []
        for position, raw in enumerate(data.entries, start=1):
            try:
                entry = TimeEntryCreate.model_validate(raw)
                rows.append(self._new_row(identity, entry, group_id))
            except ValidationError as e:
                raise ValidationFailed(f"Validation failed for entry {position}: {_describe(e)}")
            except HTTPException as e:
                raise ValidationFailed(f"Validation failed for entry {position}: {e.detail}")
        logger.info(f"Importing {len(rows)} time entries for user {identity['id']}")
        return self._insert(rows)

    def authorize_entry(self, identity: Dict[str, Any], entry_id: str) -> Dict[str, Any]:
        return self.gateway.authorize_record(
            identity, "timetracker_entries", entry_id, "Entry", user_column="user_id"
        )

    def _write(self, entry_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table("timetracker_entries")\
                .update(updates)\
                .eq("id", entry_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update time entry {entry_id}")
        if not result.data:
            raise NotFound("Entry not found")
        return result.data[0]

    def update_entry(self, identity: Dict[str, Any], entry_id: str, data: TimeEntryUpdate) -> TimeEntryResponse:
        """Full replacement of the timing fields; is_active is kept unless sent"""
        entry = self.authorize_entry(identity, entry_id)
        if data.project_id:
            self._check_project(identity, data.project_id, entry.get("group_id"))

        updates = {
            "project_id": data.project_id or None,
            "start_time": data.start_time.isoformat(),
            "end_time": data.end_time.isoformat() if data.end_time else None,
            "duration_minutes": duration_minutes(data.start_time, data.end_time),
            "description": blank_to_none(data.description),
            "is_active": data.is_active if "is_active" in data.model_fields_set else entry.get("is_active", True),
        }
        return self._attach_projects([self._write(entry_id, updates)])[0]

    def delete_entry(self, identity: Dict[str, Any], entry_id: str) -> None:
        self.authorize_entry(identity, entry_id)
        self._write(entry_id, {"is_active": False})
