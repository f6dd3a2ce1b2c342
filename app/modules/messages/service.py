import logging
from supabase import Client
from app.modules.messages.schemas import MessageCreate, MessageResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_for_user(self, user_id: str) -> List[MessageResponse]:
        """Inbox, newest first"""
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [MessageResponse(**m) for m in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def mark_read(self, message_id: str, user_id: str) -> MessageResponse:
        try:
            result = self.supabase.table("messages")\
                .update({"is_read": True})\
                .eq("id", message_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return MessageResponse(**result.data[0])

    def send(self, message: MessageCreate) -> MessageResponse:
        try:
            result = self.supabase.table("messages").insert({
                "user_id": message.user_id,
                "title": message.title,
                "body": message.body,
                "is_read": False,
            }).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to send message")
        logger.info(f"Message sent to member {message.user_id}")
        return MessageResponse(**result.data[0])
