"""
Group-scoped access gateway.

Every module route goes through one of these checks before it reads or
writes a module resource. Decisions are never cached: each call re-reads
group_members, and only active memberships count.
"""

from postgrest.exceptions import APIError
from supabase import Client
from typing import Any, Dict, Optional
import logging

from familyhub.core.errors import Forbidden, NotFound, ValidationFailed, storage_failure
from familyhub.core.schemas import normalize_group_id

logger = logging.getLogger(__name__)

ADMIN_ROLE = "Admin"
MEMBER_ROLE = "Member"


class AccessGateway:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_membership(self, user_id: str, group_id: str) -> Optional[Dict[str, Any]]:
        """Active membership row for (user, group), or None."""
        try:
            result = self.supabase.table("group_members")\
                .select("*")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, "Membership lookup failed")
        return result.data[0] if result.data else None

    def authorize_group_access(self, identity: Dict[str, Any], group_id: Optional[str]) -> Dict[str, Any]:
        """Return the caller's active membership in group_id or raise Forbidden."""
        if not group_id:
            raise ValidationFailed("groupId is required")
        membership = self.find_membership(identity["id"], group_id)
        if not membership:
            logger.warning(f"Access denied: user {identity['id']} is not an active member of group {group_id}")
            raise Forbidden("Forbidden: Not a member of this group")
        return membership

    def authorize_admin_action(self, identity: Dict[str, Any], group_id: str) -> Dict[str, Any]:
        """Like authorize_group_access, additionally requiring the Admin role."""
        membership = self.authorize_group_access(identity, group_id)
        if membership.get("role") != ADMIN_ROLE:
            logger.warning(f"Admin action denied: user {identity['id']} in group {group_id}")
            raise Forbidden("Forbidden: Only group admins can perform this action")
        return membership

    def require_member(self, group_id: str, user_id: str, field: str) -> None:
        """Reject a request naming someone other than an active member of group_id in `field`."""
        if not self.find_membership(user_id, group_id):
            raise ValidationFailed(f"{field} must be an active member of this group")

    def authorize_personal_access(self, identity: Dict[str, Any], owner_id: Optional[str]) -> None:
        if not owner_id or owner_id != identity["id"]:
            logger.warning(f"Personal access denied: user {identity['id']} on resource owned by {owner_id}")
            raise Forbidden("Forbidden: You do not own this resource")

    def authorize_scope(self, identity: Dict[str, Any], group_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Self/group scope switch.

        A blank group id means the personal scope and needs no membership;
        anything else must be a group the caller actively belongs to.
        """
        group_id = normalize_group_id(group_id)
        if group_id is None:
            return None
        return self.authorize_group_access(identity, group_id)

    def fetch_record(self, table: str, record_id: str, label: str = "Record") -> Dict[str, Any]:
        try:
            result = self.supabase.table(table)\
                .select("*")\
                .eq("id", record_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to fetch {table} {record_id}")
        if not result.data:
            raise NotFound(f"{label} not found")
        return result.data[0]

    def authorize_record(
        self,
        identity: Dict[str, Any],
        table: str,
        record_id: str,
        label: str = "Record",
        group_column: Optional[str] = "group_id",
        user_column: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Load an existing record and apply the rule for whichever owner it has.

        Group-owned records require an active membership in that group;
        records owned by a user require that user to be the caller. The
        loaded row is returned so callers don't fetch it twice.
        """
        record = self.fetch_record(table, record_id, label)
        group_id = record.get(group_column) if group_column else None
        if group_id:
            self.authorize_group_access(identity, group_id)
        elif user_column:
            self.authorize_personal_access(identity, record.get(user_column))
        else:
            logger.warning(f"{table} {record_id} has no owner column set")
            raise Forbidden()
        return record
