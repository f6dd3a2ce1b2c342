from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.wallet.models import WITHDRAWAL_PENDING
from app.modules.wallet.schemas import (
    BankDetailsResponse, BankDetailsSave, WalletResponse, WithdrawalCreate, WithdrawalResponse
)
from app.modules.wallet.service import WalletService
from app.core.dependencies import get_session, require_admin, SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/wallet", tags=["wallet"])


def get_wallet_service(supabase: Client = Depends(get_supabase)) -> WalletService:
    return WalletService(supabase)


@router.get("", response_model=WalletResponse)
async def get_wallet(
    session: SessionContext = Depends(get_session),
    service: WalletService = Depends(get_wallet_service)
):
    return service.get_wallet(session.user_id)


@router.get("/bank-details", response_model=Optional[BankDetailsResponse])
async def get_bank_details(
    session: SessionContext = Depends(get_session),
    service: WalletService = Depends(get_wallet_service)
):
    return service.get_bank_details(session.user_id)


@router.put("/bank-details", response_model=BankDetailsResponse)
async def save_bank_details(
    details: BankDetailsSave,
    session: SessionContext = Depends(get_session),
    service: WalletService = Depends(get_wallet_service)
):
    """Create or update the caller's payout bank details"""
    return service.save_bank_details(session.user_id, details)


@router.post("/withdrawals", response_model=WithdrawalResponse, status_code=201)
async def request_withdrawal(
    request_data: WithdrawalCreate,
    session: SessionContext = Depends(get_session),
    service: WalletService = Depends(get_wallet_service)
):
    """Ask for a cash-out; amount must not exceed the balance and bank details must be saved"""
    return service.request_withdrawal(session.user_id, request_data)


@router.get("/withdrawals", response_model=List[WithdrawalResponse])
async def list_my_withdrawals(
    status: Optional[str] = None,
    session: SessionContext = Depends(get_session),
    service: WalletService = Depends(get_wallet_service)
):
    return service.list_user_requests(session.user_id, status)


@router.get("/admin/withdrawals", response_model=List[WithdrawalResponse])
async def list_withdrawals(
    status: str = WITHDRAWAL_PENDING,
    session: SessionContext = Depends(require_admin),
    service: WalletService = Depends(get_wallet_service)
):
    """Withdrawal requests by status with bank details and requester (admin)"""
    return service.list_requests(status)


@router.post("/admin/withdrawals/{request_id}/approve", response_model=WithdrawalResponse)
async def approve_withdrawal(
    request_id: str,
    session: SessionContext = Depends(require_admin),
    service: WalletService = Depends(get_wallet_service)
):
    return service.approve(request_id, session.user_id)


@router.post("/admin/withdrawals/{request_id}/deny", response_model=WithdrawalResponse)
async def deny_withdrawal(
    request_id: str,
    session: SessionContext = Depends(require_admin),
    service: WalletService = Depends(get_wallet_service)
):
    return service.deny(request_id, session.user_id)
