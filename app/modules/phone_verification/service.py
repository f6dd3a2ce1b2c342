import logging
import secrets
from datetime import datetime, timedelta, timezone
from supabase import Client
from app.config.settings import settings
from app.core import mailer
from app.modules.payouts.calculator import parse_timestamp
from app.modules.phone_verification.schemas import PhoneVerificationResponse
from typing import Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

EMAIL_SUBJECT = "Profile Change Verification Code"
EMAIL_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #333;">Phone Number Change Verification</h1>
  <p>You have requested to change your phone number. Please use the following 6-digit code to verify this change:</p>
  <div style="background-color: #f4f4f4; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px;">
    <span style="font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #333;">{code}</span>
  </div>
  <p style="color: #666;">This code will expire in {ttl} minutes.</p>
  <p style="color: #666;">If you did not request this change, please ignore this email or contact support.</p>
</div>
"""


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


class PhoneVerificationService:
    """Email a one-time code before a member's phone number changes, then confirm it"""

    def __init__(self, supabase: Client, send_email=None):
        self.supabase = supabase
        self.send_email = send_email or mailer.send_email

    async def send_code(self, email: str, new_phone: str) -> PhoneVerificationResponse:
        code = generate_code()
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.verification_code_ttl_minutes)

        try:
            self.supabase.table("phone_verification_codes")\
                .delete()\
                .eq("email", email)\
                .execute()
            self.supabase.table("phone_verification_codes").insert({
                "email": email,
                "code": code,
                "new_phone": new_phone,
                "expires_at": expires_at.isoformat(),
            }).execute()
        except Exception as e:
            logger.error(f"Failed to store verification code for {email}: {e}")
            raise HTTPException(status_code=500, detail="Failed to generate verification code")

        try:
            await self.send_email(
                EMAIL_SUBJECT,
                [email],
                EMAIL_TEMPLATE.format(code=code, ttl=settings.verification_code_ttl_minutes),
            )
        except Exception as e:
            logger.error(f"Failed to send verification email to {email}: {e}")
            raise HTTPException(status_code=500, detail="Failed to send verification email")

        logger.info(f"Verification code sent to {email}")
        return PhoneVerificationResponse(success=True, message="Verification code sent")

    def verify_code(self, email: str, code: str, now: Optional[datetime] = None) -> PhoneVerificationResponse:
        """Consume a code; returns the phone number the caller should now apply"""
        now = now or datetime.now(timezone.utc)
        try:
            result = self.supabase.table("phone_verification_codes")\
                .select("*")\
                .eq("email", email)\
                .eq("code", code)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to look up verification code for {email}: {e}")
            raise HTTPException(status_code=400, detail="Invalid verification code")
        if not result.data:
            raise HTTPException(status_code=400, detail="Invalid verification code")

        record = result.data[0]
        expired = parse_timestamp(record["expires_at"]) < now
        try:
            self.supabase.table("phone_verification_codes")\
                .delete()\
                .eq("id", record["id"])\
                .execute()
        except Exception as e:
            logger.warning(f"Could not delete verification code {record['id']}: {e}")

        if expired:
            raise HTTPException(status_code=400, detail="Verification code has expired")
        return PhoneVerificationResponse(success=True, new_phone=record["new_phone"])
