from pydantic import Field
from typing import Optional, Dict
from familyhub.core.schemas import CamelModel


MODULE_NAMES = (
    "checkins",
    "finance",
    "goals",
    "chat",
    "wishlist",
    "location",
    "calendar",
    "todos",
    "plants",
    "taskplanner",
    "kitchen",
)

# Calendar, To Do and Task Planner are on for new users
DEFAULT_ENABLED_MODULES: Dict[str, bool] = {
    "checkins": False,
    "finance": False,
    "goals": False,
    "chat": False,
    "wishlist": False,
    "location": False,
    "calendar": True,
    "todos": True,
    "plants": False,
    "taskplanner": True,
    "kitchen": False,
}


def default_modules() -> Dict[str, bool]:
    return dict(DEFAULT_ENABLED_MODULES)


class UserUpdate(CamelModel):
    name: Optional[str] = None
    default_view: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None
    default_view: Optional[str] = None
    enabled_modules: Optional[Dict[str, bool]] = None


class ModulesUpdate(CamelModel):
    enabled_modules: Dict[str, bool] = Field(...)


class ModulesResponse(CamelModel):
    enabled_modules: Dict[str, bool]
