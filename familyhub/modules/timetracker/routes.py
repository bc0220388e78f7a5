from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.timetracker.schemas import (
    TimeEntryCreate, TimeEntryImport, TimeEntryUpdate, TimeEntryResponse
)
from familyhub.modules.timetracker.service import TimeTrackerService
from familyhub.modules.todos.routes import get_todo_service
from familyhub.modules.todos.schemas import ProjectCreate, ProjectUpdate, ProjectResponse
from familyhub.modules.todos.service import TodoService
from familyhub.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/timetracker", tags=["timetracker"])


def get_timetracker_service(supabase: Client = Depends(get_supabase)) -> TimeTrackerService:
    return TimeTrackerService(supabase)


# Projects are shared with the todos module

@router.get("/projects", response_model=List[ProjectResponse])
def list_projects(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    return service.list_projects(current_user, group_id)


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(
    data: ProjectCreate,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    return service.create_project(current_user, data)


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    data: ProjectUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    return service.update_project(current_user, project_id, data)


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(
    project_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    service.delete_project(current_user, project_id)
    return None


# Entries

@router.get("/entries", response_model=List[TimeEntryResponse])
def list_entries(
    group_id: Optional[str] = Query(None, alias="groupId"),
    project_id: Optional[str] = Query(None, alias="projectId"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    current_user: Dict = Depends(get_current_user),
    service: TimeTrackerService = Depends(get_timetracker_service)
):
    """Active entries in scope, newest start first; dates bound start_time inclusively"""
    return service.list_entries(current_user, group_id, project_id, start_date, end_date)


@router.post("/entries", response_model=TimeEntryResponse, status_code=201)
def create_entry(
    data: TimeEntryCreate,
    current_user: Dict = Depends(get_current_user),
    service: TimeTrackerService = Depends(get_timetracker_service)
):
    return service.create_entry(current_user, data)


@router.post("/entries/import", response_model=List[TimeEntryResponse], status_code=201)
def import_entries(
    data: TimeEntryImport,
    current_user: Dict = Depends(get_current_user),
    service: TimeTrackerService = Depends(get_timetracker_service)
):
    return service.import_entries(current_user, data)


@router.put("/entries/{entry_id}", response_model=TimeEntryResponse)
@router.patch("/entries/{entry_id}", response_model=TimeEntryResponse)
def update_entry(
    entry_id: str,
    data: TimeEntryUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TimeTrackerService = Depends(get_timetracker_service)
):
    return service.update_entry(current_user, entry_id, data)


@router.delete("/entries/{entry_id}", status_code=204)
def delete_entry(
    entry_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TimeTrackerService = Depends(get_timetracker_service)
):
    """Soft delete: the entry stays in storage with isActive false"""
    service.delete_entry(current_user, entry_id)
    return None
