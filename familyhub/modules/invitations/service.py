from postgrest.exceptions import APIError
from supabase import Client
from familyhub.config import settings
from familyhub.modules.invitations.schemas import (
    InvitationCreate, InvitationResponse, InvitationCreateResponse,
    InvitationSummary, InvitationAcceptResponse
)
from familyhub.core.access import MEMBER_ROLE
from familyhub.core.errors import (
    NotFound, ValidationFailed, Expired, AlreadyAccepted, StorageFailure,
    storage_failure, error_code, UNIQUE_VIOLATION
)
from familyhub.core.schemas import utc_now, parse_timestamp
from datetime import timedelta
from typing import Callable, Dict, Any, List, Optional
import secrets
import logging

logger = logging.getLogger(__name__)

# No 0/O or 1/I so codes survive being read aloud or retyped
SHORT_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SHORT_CODE_LENGTH = 8
MAX_SHORT_CODE_ATTEMPTS = 5

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_EXPIRED = "expired"


def generate_invite_token() -> str:
    """64 hex characters"""
    return secrets.token_hex(32)


def generate_short_code() -> str:
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def registration_link(short_code: str) -> str:
    return f"{settings.frontend_url.rstrip('/')}/register?invite={short_code}"


class InvitationService:
    def __init__(self, supabase: Client, code_generator: Callable[[], str] = generate_short_code):
        self.supabase = supabase
        self.code_generator = code_generator

    def _find_by(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("group_invitations")\
                .select("*")\
                .eq(column, value)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Invitation lookup by {column} failed")
        return result.data[0] if result.data else None

    def resolve_invitation(self, token: str) -> Dict[str, Any]:
        """
        Look an invitation up by short code, then by long token.

        An invitation past its expiry is marked expired on this read and
        rejected; an accepted one is rejected as well.
        """
        invitation = self._find_by("short_code", token) or self._find_by("invite_token", token)
        if not invitation:
            raise NotFound("Invalid invitation token")

        if utc_now() > parse_timestamp(invitation["expires_at"]):
            if invitation.get("status") == STATUS_PENDING:
                try:
                    self.supabase.table("group_invitations")\
                        .update({"status": STATUS_EXPIRED})\
                        .eq("id", invitation["id"])\
                        .execute()
                except APIError as e:
                    raise storage_failure(e, f"Failed to expire invitation {invitation['id']}")
                logger.info(f"Invitation {invitation['id']} expired")
            raise Expired()

        if invitation.get("status") == STATUS_ACCEPTED:
            raise AlreadyAccepted()
        return invitation

    def validate(self, token: str) -> InvitationSummary:
        invitation = self.resolve_invitation(token)
        if not invitation.get("group_name"):
            try:
                group = self.supabase.table("groups")\
                    .select("name")\
                    .eq("id", invitation["group_id"])\
                    .limit(1)\
                    .execute()
            except APIError as e:
                raise storage_failure(e, f"Failed to load group {invitation['group_id']}")
            if group.data:
                invitation["group_name"] = group.data[0]["name"]
        return InvitationSummary(**invitation)

    def list_invitations(self, group_id: str) -> List[InvitationResponse]:
        try:
            result = self.supabase.table("group_invitations")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list invitations for {group_id}")
        return [InvitationResponse(**row) for row in result.data or []]

    def _ensure_not_invited(self, group_id: str, email: str) -> None:
        try:
            pending = self.supabase.table("group_invitations")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("email", email)\
                .eq("status", STATUS_PENDING)\
                .gt("expires_at", utc_now().isoformat())\
                .limit(1)\
                .execute()
            if pending.data:
                raise ValidationFailed("An invitation for this email already exists")

            user = self.supabase.table("users")\
                .select("id")\
                .eq("email", email)\
                .limit(1)\
                .execute()
            if not user.data:
                return
            member = self.supabase.table("group_members")\
                .select("id")\
                .eq("group_id", group_id)\
                .eq("user_id", user.data[0]["id"])\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Duplicate check for {email} in {group_id} failed")
        if member.data:
            raise ValidationFailed("This email is already a member of this group")

    def _unused_short_code(self) -> str:
        for _ in range(MAX_SHORT_CODE_ATTEMPTS):
            code = self.code_generator()
            if not self._find_by("short_code", code):
                return code
        raise StorageFailure("Could not allocate a unique invitation code")

    def create_invitation(
        self, group_id: str, invitation_data: InvitationCreate, invited_by: str
    ) -> InvitationCreateResponse:
        """Create a pending invitation with a fresh token and short code"""
        try:
            group = self.supabase.table("groups")\
                .select("name")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to load group {group_id}")
        if not group.data:
            raise NotFound("Group not found")

        email = str(invitation_data.email)
        self._ensure_not_invited(group_id, email)

        row = {
            "group_id": group_id,
            "group_name": group.data[0]["name"],
            "invited_by_user_id": invited_by,
            "email": email,
            "full_name": invitation_data.full_name,
            "invite_token": generate_invite_token(),
            "status": STATUS_PENDING,
            "expires_at": (utc_now() + timedelta(days=settings.invitation_ttl_days)).isoformat(),
        }

        # short_code is UNIQUE in storage; a 23505 here means a concurrent insert took it
        for attempt in range(1, MAX_SHORT_CODE_ATTEMPTS + 1):
            row["short_code"] = self._unused_short_code()
            try:
                result = self.supabase.table("group_invitations").insert(row).execute()
                break
            except APIError as e:
                if error_code(e) == UNIQUE_VIOLATION and attempt < MAX_SHORT_CODE_ATTEMPTS:
                    logger.warning(f"Short code collision on insert (attempt {attempt}), regenerating")
                    row["invite_token"] = generate_invite_token()
                    continue
                raise storage_failure(e, f"Failed to create invitation for {email}")

        invitation = InvitationResponse(**result.data[0])
        logger.info(f"Invitation {invitation.id} created for group {group_id} by {invited_by}")
        return InvitationCreateResponse(
            invitation=invitation,
            registration_link=registration_link(invitation.short_code),
        )

    def accept_invitation(self, token: str, user_id: str) -> InvitationAcceptResponse:
        """Join the invited group as a Member and close the invitation"""
        invitation = self.resolve_invitation(token)
        group_id = invitation["group_id"]

        try:
            existing = self.supabase.table("group_members")\
                .select("*")\
                .eq("group_id", group_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if not existing.data:
                self.supabase.table("group_members").insert({
                    "group_id": group_id,
                    "user_id": user_id,
                    "role": MEMBER_ROLE,
                    "is_active": True,
                }).execute()
                role = MEMBER_ROLE
            else:
                role = existing.data[0]["role"]
                if not existing.data[0].get("is_active"):
                    self.supabase.table("group_members")\
                        .update({"is_active": True})\
                        .eq("group_id", group_id)\
                        .eq("user_id", user_id)\
                        .execute()

            self.supabase.table("group_invitations")\
                .update({"status": STATUS_ACCEPTED, "accepted_at": utc_now().isoformat()})\
                .eq("id", invitation["id"])\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to accept invitation {invitation['id']}")

        logger.info(f"User {user_id} joined group {group_id} via invitation {invitation['id']}")
        return InvitationAcceptResponse(group_id=group_id, role=role, status=STATUS_ACCEPTED)
