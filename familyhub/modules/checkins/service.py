from postgrest.exceptions import APIError
from supabase import Client
from familyhub.modules.checkins.schemas import (
    CheckInCreate, CheckInResponse, QuestionCreate, QuestionResponse, CheckInMember
)
from familyhub.modules.groups.service import GroupService
from familyhub.core.access import ADMIN_ROLE
from familyhub.core.errors import storage_failure
from typing import List
import logging

logger = logging.getLogger(__name__)


class CheckInService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_check_ins(self, group_id: str) -> List[CheckInResponse]:
        try:
            result = self.supabase.table("check_ins")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("timestamp", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list check-ins for {group_id}")
        return [CheckInResponse(**row) for row in result.data or []]

    def create_check_in(self, data: CheckInCreate, user_id: str) -> CheckInResponse:
        row = {
            "group_id": data.group_id,
            "member_id": data.member_id or user_id,
            "mood": data.mood,
            "note": data.note,
            "location": data.location or None,
            "question_id": data.question_id or None,
        }
        try:
            result = self.supabase.table("check_ins").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to create check-in in {data.group_id}")
        return CheckInResponse(**result.data[0])

    def list_questions(self, group_id: str) -> List[QuestionResponse]:
        try:
            result = self.supabase.table("questions")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("timestamp", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list questions for {group_id}")
        return [QuestionResponse(**row) for row in result.data or []]

    def create_question(self, data: QuestionCreate, user_id: str) -> QuestionResponse:
        row = {
            "group_id": data.group_id,
            "text": data.text,
            "topic": data.topic,
            "created_by": user_id,
            "is_active": data.is_active,
        }
        try:
            result = self.supabase.table("questions").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to create question in {data.group_id}")
        return QuestionResponse(**result.data[0])

    def list_members(self, group_id: str) -> List[CheckInMember]:
        """Active members, with Admin shown as Parent and everyone else as Child"""
        members = GroupService(self.supabase).list_active_members(group_id)
        return [
            CheckInMember(
                id=member["user"]["id"],
                name=member["user"].get("name") or member["user"].get("email"),
                avatar=member["user"].get("avatar") or "",
                role="Parent" if member["role"] == ADMIN_ROLE else "Child",
            )
            for member in members
        ]
