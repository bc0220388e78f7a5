from fastapi import APIRouter, Depends
from familyhub.modules.auth.schemas import RegisterRequest, RegisterResponse
from familyhub.modules.auth.service import AuthService
from familyhub.core.dependencies import get_auth_service, get_current_user
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.get("/me")
def get_me(current_user: Dict = Depends(get_current_user)):
    """Identity resolved from the bearer token"""
    return current_user
