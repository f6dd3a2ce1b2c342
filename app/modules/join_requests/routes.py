from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.join_requests.schemas import (
    JoinRequestCreate, JoinRequestResponse, MarkPaidRequest, MyRequestsResponse, WorkflowResult
)
from app.modules.join_requests.service import JoinRequestService
from app.core.dependencies import get_session, require_admin, require_member, SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/join-requests", tags=["join-requests"])


def get_join_request_service(supabase: Client = Depends(get_supabase)) -> JoinRequestService:
    return JoinRequestService(supabase)


@router.post("", response_model=JoinRequestResponse, status_code=201)
async def submit_join_request(
    request_data: JoinRequestCreate,
    session: SessionContext = Depends(require_member),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Request contract units in an open group (pending admin approval)"""
    return service.submit(session.user_id, request_data)


@router.get("/me", response_model=MyRequestsResponse)
async def list_my_requests(
    session: SessionContext = Depends(get_session),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """The caller's requests and pending units per group"""
    return service.list_for_user(session.user_id)


@router.get("", response_model=List[JoinRequestResponse])
async def list_requests(
    status: Optional[str] = None,
    group_id: Optional[str] = None,
    session: SessionContext = Depends(require_admin),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """All join requests, optionally filtered by status or group (admin)"""
    return service.list_requests(status=status, group_id=group_id)


@router.post("/{request_id}/approve", response_model=WorkflowResult)
async def approve_request(
    request_id: str,
    session: SessionContext = Depends(require_admin),
    service: JoinRequestService = Depends(get_join_request_service)
):
    return service.approve(request_id)


@router.post("/{request_id}/reject", response_model=WorkflowResult)
async def reject_request(
    request_id: str,
    session: SessionContext = Depends(require_admin),
    service: JoinRequestService = Depends(get_join_request_service)
):
    return service.reject(request_id)


@router.post("/mark-paid", response_model=WorkflowResult)
async def mark_paid(
    body: MarkPaidRequest,
    session: SessionContext = Depends(require_admin),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Record that a member's approved contracts have been funded"""
    return service.mark_paid(body.group_id, body.user_id)
