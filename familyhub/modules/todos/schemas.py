from pydantic import Field, field_validator
from typing import Optional, Union, Dict, Any
from datetime import datetime
from familyhub.core.schemas import CamelModel, reject_null

TASK_TYPES = ("personal", "work", "group")
DEFAULT_TASK_TYPE = "personal"
DEFAULT_PROJECT_COLOR = "#6366f1"

PRIORITY_TO_INT = {"high": 1, "medium": 2, "low": 3}
INT_TO_PRIORITY = {v: k for k, v in PRIORITY_TO_INT.items()}


def category_to_type(category: Optional[str]) -> str:
    return category if category in TASK_TYPES else DEFAULT_TASK_TYPE


def type_to_category(task_type: Optional[str]) -> str:
    return task_type if task_type in TASK_TYPES else DEFAULT_TASK_TYPE


def priority_to_int(priority: Union[int, str, None]) -> int:
    """Text priority to storage; integers pass through, anything unknown is 0"""
    if isinstance(priority, bool):
        return 0
    if isinstance(priority, int):
        return priority
    return PRIORITY_TO_INT.get(priority, 0)


def priority_to_text(priority: Optional[int]) -> str:
    return INT_TO_PRIORITY.get(priority, "medium")


class TodoCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Union[int, str, None] = None
    completed: bool = False
    group_id: Optional[str] = None
    project_id: Optional[str] = None
    due_date: Optional[datetime] = None


class TodoUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Union[int, str, None] = None
    completed: Optional[bool] = None
    group_id: Optional[str] = None
    project_id: Optional[str] = None
    due_date: Optional[datetime] = None


class TodoResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    category: str
    priority: str
    user_id: str
    group_id: Optional[str] = None
    project_id: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "TodoResponse":
        return cls(
            id=row["id"],
            title=row.get("title") or row.get("text") or "",
            description=row.get("description"),
            completed=bool(row.get("completed")),
            completed_at=row.get("completed_at"),
            category=type_to_category(row.get("type")),
            priority=priority_to_text(row.get("priority")),
            user_id=row["user_id"],
            group_id=row.get("group_id"),
            project_id=row.get("project_id"),
            due_date=row.get("due_date"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    group_id: Optional[str] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, value):
        return reject_null(value)


class ProjectResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = DEFAULT_PROJECT_COLOR
    user_id: str
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
