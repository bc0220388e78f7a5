from fastapi import APIRouter, Depends
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.users.schemas import UserUpdate, UserResponse, ModulesUpdate, ModulesResponse
from familyhub.modules.users.service import UserService
from familyhub.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Current user's profile"""
    return service.get_user_by_id(current_user["id"])


@router.patch("/me", response_model=UserResponse)
def update_me(
    user_data: UserUpdate,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update current user's profile"""
    return service.update_user(current_user["id"], user_data)


@router.get("/me/modules", response_model=ModulesResponse)
def get_my_modules(
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Enabled modules for the current user (defaults when nothing is stored)"""
    return service.get_enabled_modules(current_user["id"])


@router.patch("/me/modules", response_model=ModulesResponse)
def update_my_modules(
    modules_data: ModulesUpdate,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return service.update_enabled_modules(current_user["id"], modules_data)
