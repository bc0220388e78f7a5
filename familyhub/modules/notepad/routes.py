from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.integrations.gemini import GeminiClient, get_gemini_client
from familyhub.modules.notepad.schemas import (
    FolderCreate, FolderUpdate, FolderResponse, NoteCreate, NoteUpdate, NoteResponse,
    ExtractedTasksResponse
)
from familyhub.modules.notepad.service import NotepadService
from familyhub.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/notepad", tags=["notepad"])


def get_notepad_service(supabase: Client = Depends(get_supabase)) -> NotepadService:
    return NotepadService(supabase)


@router.get("/folders", response_model=List[FolderResponse])
def list_folders(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    """Personal folders, or every folder of a group when groupId is given"""
    return service.list_folders(current_user, group_id)


@router.post("/folders", response_model=FolderResponse, status_code=201)
def create_folder(
    data: FolderCreate,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    return service.create_folder(current_user, data)


@router.patch("/folders/{folder_id}", response_model=FolderResponse)
def update_folder(
    folder_id: str,
    data: FolderUpdate,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    return service.update_folder(current_user, folder_id, data)


@router.delete("/folders/{folder_id}", status_code=204)
def delete_folder(
    folder_id: str,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    service.delete_folder(current_user, folder_id)
    return None


@router.get("/notes", response_model=List[NoteResponse])
def list_notes(
    group_id: Optional[str] = Query(None, alias="groupId"),
    folder_id: Optional[str] = Query(None, alias="folderId"),
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    """Notes in scope, most recently updated first"""
    return service.list_notes(current_user, group_id, folder_id)


@router.post("/notes", response_model=NoteResponse, status_code=201)
def create_note(
    data: NoteCreate,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    return service.create_note(current_user, data)


@router.patch("/notes/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: str,
    data: NoteUpdate,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    return service.update_note(current_user, note_id, data)


@router.delete("/notes/{note_id}", status_code=204)
def delete_note(
    note_id: str,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service)
):
    service.delete_note(current_user, note_id)
    return None


@router.post("/notes/{note_id}/extract-tasks", response_model=ExtractedTasksResponse)
def extract_tasks(
    note_id: str,
    current_user: Dict = Depends(get_current_user),
    service: NotepadService = Depends(get_notepad_service),
    gemini: GeminiClient = Depends(get_gemini_client)
):
    return service.extract_tasks(current_user, note_id, gemini)
