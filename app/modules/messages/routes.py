from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.messages.schemas import MessageCreate, MessageResponse
from app.modules.messages.service import MessageService
from app.core.dependencies import get_session, require_admin, SessionContext
from supabase import Client
from typing import List

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(supabase: Client = Depends(get_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("", response_model=List[MessageResponse])
async def list_messages(
    session: SessionContext = Depends(get_session),
    service: MessageService = Depends(get_message_service)
):
    return service.list_for_user(session.user_id)


@router.post("/{message_id}/read", response_model=MessageResponse)
async def mark_read(
    message_id: str,
    session: SessionContext = Depends(get_session),
    service: MessageService = Depends(get_message_service)
):
    return service.mark_read(message_id, session.user_id)


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    message: MessageCreate,
    session: SessionContext = Depends(require_admin),
    service: MessageService = Depends(get_message_service)
):
    """Drop a notification into a member's inbox (admin)"""
    return service.send(message)
