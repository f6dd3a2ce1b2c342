from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_service_supabase
from app.modules.phone_verification.models import ACTION_SEND, ACTION_VERIFY
from app.modules.phone_verification.schemas import PhoneVerificationRequest, PhoneVerificationResponse
from app.modules.phone_verification.service import PhoneVerificationService
from app.core.dependencies import get_session, SessionContext
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/phone-verification", tags=["phone-verification"])


def get_phone_verification_service(
    supabase: Client = Depends(get_service_supabase)
) -> PhoneVerificationService:
    return PhoneVerificationService(supabase)


@router.post("", response_model=PhoneVerificationResponse)
async def phone_verification(
    body: PhoneVerificationRequest,
    action: Optional[str] = None,
    session: SessionContext = Depends(get_session),
    service: PhoneVerificationService = Depends(get_phone_verification_service)
):
    """action=send emails a code for {email, newPhone}; action=verify checks {email, code}"""
    action = action or body.action
    if body.email and not session.is_admin and (session.email or "").lower() != body.email.lower():
        raise HTTPException(status_code=403, detail="You can only verify your own email")

    if action == ACTION_SEND:
        if not body.email or not body.new_phone:
            raise HTTPException(status_code=400, detail="Email and new phone are required")
        return await service.send_code(body.email, body.new_phone)
    if action == ACTION_VERIFY:
        if not body.email or not body.code:
            raise HTTPException(status_code=400, detail="Email and code are required")
        return service.verify_code(body.email, body.code)
    raise HTTPException(status_code=400, detail="Invalid action. Use 'send' or 'verify'")
