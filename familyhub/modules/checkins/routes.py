from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.modules.checkins.schemas import (
    CheckInCreate, CheckInResponse, QuestionCreate, QuestionResponse, CheckInMember
)
from familyhub.modules.checkins.service import CheckInService
from familyhub.core.access import AccessGateway
from familyhub.core.dependencies import get_current_user, get_access_gateway
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/checkins", tags=["checkins"])


def get_checkin_service(supabase: Client = Depends(get_supabase)) -> CheckInService:
    return CheckInService(supabase)


@router.get("", response_model=List[CheckInResponse])
def list_check_ins(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: CheckInService = Depends(get_checkin_service)
):
    """Group check-ins, newest first"""
    gateway.authorize_group_access(current_user, group_id)
    return service.list_check_ins(group_id)


@router.post("", response_model=CheckInResponse, status_code=201)
def create_check_in(
    data: CheckInCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: CheckInService = Depends(get_checkin_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    if data.member_id and data.member_id != current_user["id"]:
        gateway.require_member(data.group_id, data.member_id, "memberId")
    return service.create_check_in(data, current_user["id"])


@router.get("/questions", response_model=List[QuestionResponse])
def list_questions(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: CheckInService = Depends(get_checkin_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_questions(group_id)


@router.post("/questions", response_model=QuestionResponse, status_code=201)
def create_question(
    data: QuestionCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: CheckInService = Depends(get_checkin_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.create_question(data, current_user["id"])


@router.get("/members", response_model=List[CheckInMember])
def list_members(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: CheckInService = Depends(get_checkin_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_members(group_id)
