from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.payouts.schemas import HoldingsSummaryResponse
from app.modules.payouts.service import PayoutService
from app.core.dependencies import get_session, require_admin, SessionContext
from supabase import Client

router = APIRouter(prefix="/payouts", tags=["payouts"])


def get_payout_service(supabase: Client = Depends(get_supabase)) -> PayoutService:
    return PayoutService(supabase)


@router.get("/me", response_model=HoldingsSummaryResponse)
async def my_payouts(
    session: SessionContext = Depends(get_session),
    service: PayoutService = Depends(get_payout_service)
):
    """Caller's holdings and payout schedule"""
    return service.holdings(session.user_id)


@router.get("/users/{user_id}", response_model=HoldingsSummaryResponse)
async def member_payouts(
    user_id: str,
    session: SessionContext = Depends(require_admin),
    service: PayoutService = Depends(get_payout_service)
):
    """A member's holdings and payout schedule (admin)"""
    return service.holdings(user_id)
