from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupResponse, GroupMemberResponse, MembershipResponse
)
from familyhub.core.access import ADMIN_ROLE
from familyhub.core.compensation import InsertLog
from familyhub.core.errors import NotFound, Conflict, storage_failure
from familyhub.core.schemas import blank_to_none
from typing import List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a group; the creator becomes its first Admin"""
        log = InsertLog(self.supabase)
        try:
            group = log.insert("groups", {
                "name": group_data.name,
                "description": group_data.description,
                "avatar": blank_to_none(group_data.avatar),
                "privacy": group_data.privacy,
                "created_by": user_id,
            })[0]
            log.insert("group_members", {
                "group_id": group["id"],
                "user_id": user_id,
                "role": ADMIN_ROLE,
                "is_active": True,
            })
        except APIError as e:
            # A group without an admin is unreachable
            log.rollback()
            raise storage_failure(e, "Failed to create group")

        logger.info(f"Group {group['id']} created by {user_id}")
        return GroupResponse(**group)

    def get_group_by_id(self, group_id: str) -> GroupResponse:
        """Get group by ID"""
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to load group {group_id}")

        if not result.data:
            raise NotFound("Group not found")
        return GroupResponse(**result.data[0])

    def update_group(self, group_id: str, group_data: GroupUpdate) -> GroupResponse:
        """Apply the fields present in the request"""
        sent = group_data.model_fields_set
        update_data = {}
        if "name" in sent and group_data.name:
            update_data["name"] = group_data.name
        if "description" in sent:
            update_data["description"] = group_data.description or None
        if "avatar" in sent:
            update_data["avatar"] = blank_to_none(group_data.avatar)
        if "privacy" in sent and group_data.privacy:
            update_data["privacy"] = group_data.privacy
        if "enabled_modules" in sent:
            update_data["enabled_modules"] = group_data.enabled_modules

        if not update_data:
            return self.get_group_by_id(group_id)

        try:
            result = self.supabase.table("groups")\
                .update(update_data)\
                .eq("id", group_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update group {group_id}")

        if not result.data:
            raise NotFound("Group not found")
        return GroupResponse(**result.data[0])

    def list_groups_for_user(self, user_id: str) -> List[GroupResponse]:
        """Groups where the user holds an active membership"""
        try:
            members_result = self.supabase.table("group_members")\
                .select("group_id")\
                .eq("user_id", user_id)\
                .eq("is_active", True)\
                .execute()
            if not members_result.data:
                return []
            group_ids = [m["group_id"] for m in members_result.data]
            result = self.supabase.table("groups")\
                .select("*")\
                .in_("id", group_ids)\
                .order("created_at", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list groups for {user_id}")
        return [GroupResponse(**group) for group in result.data]

    def list_active_members(self, group_id: str) -> List[Dict[str, Any]]:
        """Active membership rows joined with their user profiles, oldest member first"""
        try:
            members_result = self.supabase.table("group_members")\
                .select("*")\
                .eq("group_id", group_id)\
                .eq("is_active", True)\
                .order("joined_at")\
                .execute()
            members = members_result.data or []
            if not members:
                return []
            users_result = self.supabase.table("users")\
                .select("id, name, email, avatar")\
                .in_("id", [m["user_id"] for m in members])\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list members of {group_id}")

        users = {u["id"]: u for u in users_result.data or []}
        return [
            {**member, "user": users.get(member["user_id"], {"id": member["user_id"]})}
            for member in members
        ]

    def list_members(self, group_id: str) -> List[GroupMemberResponse]:
        return [
            GroupMemberResponse(
                id=member["user"]["id"],
                name=member["user"].get("name"),
                email=member["user"].get("email"),
                avatar=member["user"].get("avatar"),
                role=member["role"],
                status="active" if member.get("is_active") else "inactive",
                join_date=member.get("joined_at"),
            )
            for member in self.list_active_members(group_id)
        ]

    @staticmethod
    def membership_info(membership: Dict[str, Any]) -> MembershipResponse:
        return MembershipResponse(
            role=membership["role"],
            is_admin=membership["role"] == ADMIN_ROLE,
            is_active=bool(membership.get("is_active")),
        )

    def deactivate_member(self, group_id: str, user_id: str) -> None:
        """Mark a membership inactive; the last active admin cannot be removed"""
        try:
            target = self.supabase.table("group_members")\
                .select("*")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
            if not target.data:
                raise NotFound("Member not found")

            if target.data[0]["role"] == ADMIN_ROLE:
                admins = self.supabase.table("group_members")\
                    .select("user_id")\
                    .eq("group_id", group_id)\
                    .eq("role", ADMIN_ROLE)\
                    .eq("is_active", True)\
                    .execute()
                if len(admins.data or []) <= 1:
                    raise Conflict("A group must keep at least one active admin")

            self.supabase.table("group_members")\
                .update({"is_active": False})\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to deactivate {user_id} in {group_id}")
        logger.info(f"Membership of {user_id} in {group_id} deactivated")
