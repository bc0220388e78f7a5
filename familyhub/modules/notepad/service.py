from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client
from familyhub.integrations.gemini import GeminiClient
from familyhub.modules.notepad.schemas import (
    FolderCreate, FolderUpdate, FolderResponse, NoteCreate, NoteUpdate, NoteResponse,
    ExtractedTask, ExtractedTasksResponse
)
from familyhub.core.access import AccessGateway
from familyhub.core.errors import NotFound, ValidationFailed, storage_failure, is_missing_relation
from familyhub.core.schemas import normalize_group_id, utc_now
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class NotepadService:
    """
    Folders and notes in either scope.

    Personal folders and notes have group_id NULL and belong to their creator;
    group ones are shared by every active member of the group.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.gateway = AccessGateway(supabase)

    def _scoped_select(self, table: str, identity: Dict[str, Any], group_id: Optional[str]):
        query = self.supabase.table(table).select("*")
        if group_id:
            return query.eq("group_id", group_id)
        return query.eq("user_id", identity["id"]).is_("group_id", "null")

    def _update(self, table: str, record_id: str, updates: Dict[str, Any], label: str) -> Dict[str, Any]:
        if not updates:
            raise ValidationFailed("No valid fields to update")
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table(table)\
                .update(updates)\
                .eq("id", record_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update {table} {record_id}")
        if not result.data:
            raise NotFound(f"{label} not found")
        return result.data[0]

    # Folders

    def list_folders(self, identity: Dict[str, Any], group_id: Optional[str]) -> List[FolderResponse]:
        group_id = normalize_group_id(group_id)
        self.gateway.authorize_scope(identity, group_id)
        try:
            result = self._scoped_select("notepad_folders", identity, group_id)\
                .order("name")\
                .execute()
        except APIError as e:
            if is_missing_relation(e):
                logger.warning("notepad_folders table missing, returning empty list")
                return []
            raise storage_failure(e, "Failed to list folders")
        return [FolderResponse(**row) for row in result.data or []]

    def create_folder(self, identity: Dict[str, Any], data: FolderCreate) -> FolderResponse:
        group_id = normalize_group_id(data.group_id)
        self.gateway.authorize_scope(identity, group_id)
        now = utc_now().isoformat()
        try:
            result = self.supabase.table("notepad_folders").insert({
                "name": data.name,
                "user_id": identity["id"],
                "group_id": group_id,
                "created_at": now,
                "updated_at": now,
            }).execute()
        except APIError as e:
            raise storage_failure(e, "Failed to create folder")
        return FolderResponse(**result.data[0])

    def authorize_folder(self, identity: Dict[str, Any], folder_id: str) -> Dict[str, Any]:
        return self.gateway.authorize_record(
            identity, "notepad_folders", folder_id, "Folder", user_column="user_id"
        )

    def update_folder(self, identity: Dict[str, Any], folder_id: str, data: FolderUpdate) -> FolderResponse:
        self.authorize_folder(identity, folder_id)
        return FolderResponse(**self._update("notepad_folders", folder_id, data.to_row(), "Folder"))

    def delete_folder(self, identity: Dict[str, Any], folder_id: str) -> None:
        """Delete a folder; its notes are kept and unfiled"""
        self.authorize_folder(identity, folder_id)
        try:
            self.supabase.table("notepad_notes")\
                .update({"folder_id": None})\
                .eq("folder_id", folder_id)\
                .execute()
            self.supabase.table("notepad_folders").delete().eq("id", folder_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete folder {folder_id}")

    # Notes

    def _check_folder(self, identity: Dict[str, Any], folder_id: str, group_id: Optional[str]) -> None:
        """A note may only be filed in a folder of its own scope"""
        folder = self.gateway.fetch_record("notepad_folders", folder_id, "Folder")
        same_scope = folder.get("group_id") == group_id
        if same_scope and group_id is None:
            same_scope = folder.get("user_id") == identity["id"]
        if not same_scope:
            raise ValidationFailed("Folder does not belong to the same context")

    def list_notes(
        self, identity: Dict[str, Any], group_id: Optional[str], folder_id: Optional[str]
    ) -> List[NoteResponse]:
        group_id = normalize_group_id(group_id)
        self.gateway.authorize_scope(identity, group_id)
        query = self._scoped_select("notepad_notes", identity, group_id)
        if folder_id:
            query = query.eq("folder_id", folder_id)
        try:
            result = query.order("updated_at", desc=True).execute()
        except APIError as e:
            if is_missing_relation(e):
                logger.warning("notepad_notes table missing, returning empty list")
                return []
            raise storage_failure(e, "Failed to list notes")
        return [NoteResponse(**row) for row in result.data or []]

    def create_note(self, identity: Dict[str, Any], data: NoteCreate) -> NoteResponse:
        group_id = normalize_group_id(data.group_id)
        self.gateway.authorize_scope(identity, group_id)
        if data.folder_id:
            self._check_folder(identity, data.folder_id, group_id)

        now = utc_now().isoformat()
        try:
            result = self.supabase.table("notepad_notes").insert({
                "title": data.title,
                "content": data.content or "",
                "folder_id": data.folder_id or None,
                "user_id": identity["id"],
                "group_id": group_id,
                "created_at": now,
                "updated_at": now,
            }).execute()
        except APIError as e:
            raise storage_failure(e, "Failed to create note")
        return NoteResponse(**result.data[0])

    def authorize_note(self, identity: Dict[str, Any], note_id: str) -> Dict[str, Any]:
        return self.gateway.authorize_record(
            identity, "notepad_notes", note_id, "Note", user_column="user_id"
        )

    def update_note(self, identity: Dict[str, Any], note_id: str, data: NoteUpdate) -> NoteResponse:
        note = self.authorize_note(identity, note_id)
        updates = data.to_row()
        if "folder_id" in updates:
            updates["folder_id"] = updates["folder_id"] or None
            if updates["folder_id"] and updates["folder_id"] != note.get("folder_id"):
                self._check_folder(identity, updates["folder_id"], note.get("group_id"))
        return NoteResponse(**self._update("notepad_notes", note_id, updates, "Note"))

    def delete_note(self, identity: Dict[str, Any], note_id: str) -> None:
        self.authorize_note(identity, note_id)
        try:
            self.supabase.table("notepad_notes").delete().eq("id", note_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete note {note_id}")

    def extract_tasks(self, identity: Dict[str, Any], note_id: str, gemini: GeminiClient) -> ExtractedTasksResponse:
        """Ask the AI service for actionable tasks in a note; unusable suggestions are dropped"""
        note = self.authorize_note(identity, note_id)
        tasks = []
        for raw in gemini.extract_tasks(note.get("title") or "", note.get("content") or ""):
            try:
                tasks.append(ExtractedTask.model_validate(raw))
            except ValidationError:
                logger.warning(f"Dropping unusable task suggestion for note {note_id}: {raw!r}")
        return ExtractedTasksResponse(tasks=tasks)
