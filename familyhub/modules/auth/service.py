from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.auth.schemas import RegisterRequest, RegisterResponse
from familyhub.core.errors import Unauthenticated, ValidationFailed, StorageFailure, storage_failure
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user with Supabase Auth and provision the profile row"""
        user_metadata = {}
        if register_data.name:
            user_metadata["name"] = register_data.name

        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise ValidationFailed("User already exists")
            logger.error(f"Registration failed for {register_data.email}: {error_message}")
            raise StorageFailure(f"Registration failed: {error_message}")

        if not auth_response.user:
            raise ValidationFailed("Failed to register user")

        user_id = auth_response.user.id
        email = auth_response.user.email or register_data.email
        try:
            self.supabase.table("users").insert({
                "id": user_id,
                "email": email,
                "name": register_data.name,
            }).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to create profile for {user_id}")

        logger.info(f"Registered user {user_id}")
        return RegisterResponse(
            user_id=user_id,
            email=email,
            message="User registered successfully"
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve the identity behind a Supabase Auth access token"""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.info(f"Token verification failed: {e}")
            raise Unauthenticated("Invalid or expired token")
        if not user_response or not user_response.user:
            raise Unauthenticated("Invalid or expired token")
        user = user_response.user
        return {
            "id": user.id,
            "email": user.email,
            "role": getattr(user, "role", None) or "authenticated",
        }
