from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.users.schemas import (
    UserUpdate, UserResponse, ModulesUpdate, ModulesResponse, default_modules
)
from familyhub.core.errors import (
    NotFound, ValidationFailed, StorageFailure, storage_failure, error_code, UNDEFINED_COLUMN
)
from familyhub.core.schemas import blank_to_none
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to load user {user_id}")

        if not result.data:
            raise NotFound("User not found")
        return UserResponse(**result.data[0])

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update profile; blank avatar/phone clear the stored value"""
        updates = {}
        sent = user_data.model_fields_set
        if "name" in sent:
            updates["name"] = user_data.name
        if "default_view" in sent:
            updates["default_view"] = user_data.default_view
        if "avatar" in sent:
            updates["avatar"] = blank_to_none(user_data.avatar)
        if "phone" in sent:
            updates["phone"] = blank_to_none(user_data.phone)

        if not updates:
            raise ValidationFailed("No fields to update")

        try:
            result = self.supabase.table("users")\
                .update(updates)\
                .eq("id", user_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update user {user_id}")

        if not result.data:
            raise NotFound("User not found")
        return UserResponse(**result.data[0])

    def get_enabled_modules(self, user_id: str) -> ModulesResponse:
        """Stored module configuration, or the defaults when none is stored yet"""
        try:
            result = self.supabase.table("users")\
                .select("enabled_modules")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            if error_code(e) == UNDEFINED_COLUMN:
                logger.info("users.enabled_modules column missing, returning defaults")
                return ModulesResponse(enabled_modules=default_modules())
            raise storage_failure(e, f"Failed to load modules for {user_id}")

        stored = result.data[0].get("enabled_modules") if result.data else None
        return ModulesResponse(enabled_modules=stored or default_modules())

    def update_enabled_modules(self, user_id: str, modules_data: ModulesUpdate) -> ModulesResponse:
        try:
            result = self.supabase.table("users")\
                .update({"enabled_modules": modules_data.enabled_modules})\
                .eq("id", user_id)\
                .execute()
        except APIError as e:
            if error_code(e) == UNDEFINED_COLUMN:
                raise StorageFailure("Database column not found. Please run migration first.")
            raise storage_failure(e, f"Failed to update modules for {user_id}")

        if not result.data:
            raise NotFound("User not found")
        return ModulesResponse(enabled_modules=result.data[0]["enabled_modules"])
