from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.todos.schemas import (
    TodoCreate, TodoUpdate, TodoResponse, ProjectCreate, ProjectUpdate, ProjectResponse
)
from familyhub.modules.todos.service import TodoService
from familyhub.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/todos", tags=["todos"])


def get_todo_service(supabase: Client = Depends(get_supabase)) -> TodoService:
    return TodoService(supabase)


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


@router.get("", response_model=List[TodoResponse])
def list_todos(
    group_id: Optional[str] = Query(None, alias="groupId"),
    category: Optional[str] = Query(None),
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    """Personal todos, or every todo of a group when groupId is given"""
    return service.list_todos(current_user, group_id, category)


@router.post("", response_model=TodoResponse, status_code=201)
def create_todo(
    data: TodoCreate,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    return service.create_todo(current_user, data)


@router.patch("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    data: TodoUpdate,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    return service.update_todo(current_user, todo_id, data)


@router.patch("/{todo_id}/toggle", response_model=TodoResponse)
def toggle_todo(
    todo_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    return service.toggle_todo(current_user, todo_id)


@router.delete("/{todo_id}", status_code=204)
def delete_todo(
    todo_id: str,
    current_user: Dict = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service)
):
    service.delete_todo(current_user, todo_id)
    return None
