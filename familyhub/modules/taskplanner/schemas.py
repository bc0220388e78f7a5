from pydantic import Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime
from familyhub.core.schemas import CamelModel, reject_null

FAMILY_GOAL_TYPE = "Family"
PERSONAL_GOAL_TYPE = "Personal"
DEFAULT_TIMEFRAME = "1 Year"


class PlannerGoalCreate(CamelModel):
    """`goal` is accepted as an alias of `text`"""
    text: Optional[str] = None
    goal: Optional[str] = None
    progress: int = Field(0, ge=0, le=100)
    group_id: Optional[str] = None

    @property
    def goal_text(self) -> str:
        return (self.text or self.goal or "").strip()


class PlannerGoalUpdate(CamelModel):
    text: Optional[str] = Field(None, min_length=1)
    goal: Optional[str] = Field(None, min_length=1)
    progress: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("text", "goal", "progress")
    @classmethod
    def _not_null(cls, value):
        return reject_null(value)


class PlannerGoalResponse(CamelModel):
    id: str
    text: str
    goal: str
    progress: int = 0
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PlannerGoalResponse":
        text = row.get("text") or row.get("title") or ""
        return cls(
            id=row["id"],
            text=text,
            goal=text,
            progress=row.get("progress") or 0,
            group_id=row.get("group_id"),
            created_at=row.get("created_at"),
        )
