import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.wallet.models import WITHDRAWAL_APPROVED, WITHDRAWAL_DENIED, WITHDRAWAL_PENDING
from app.modules.wallet.schemas import (
    BankDetailsResponse, BankDetailsSave, WalletResponse, WithdrawalCreate, WithdrawalResponse
)
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class WalletService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_wallet(self, user_id: str) -> WalletResponse:
        """Current balance; a member without a wallet row has a zero balance"""
        try:
            result = self.supabase.table("wallets")\
                .select("balance")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching wallet balance for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch wallet balance.")
        balance = float(result.data[0].get("balance") or 0) if result.data else 0.0
        return WalletResponse(user_id=user_id, balance=balance)

    def get_bank_details(self, user_id: str) -> Optional[BankDetailsResponse]:
        try:
            result = self.supabase.table("bank_details")\
                .select("*")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return BankDetailsResponse(**result.data[0]) if result.data else None

    def save_bank_details(self, user_id: str, details: BankDetailsSave) -> BankDetailsResponse:
        """Insert the member's bank details, or update the record they already have"""
        payload = {
            "user_id": user_id,
            "bank_name": details.bank_name,
            "account_number": details.account_number,
            "account_holder_name": details.account_holder_name,
            "swift_code": details.swift_code or None,
        }
        existing = self.get_bank_details(user_id)
        try:
            if existing:
                result = self.supabase.table("bank_details")\
                    .update(payload)\
                    .eq("id", existing.id)\
                    .execute()
            else:
                result = self.supabase.table("bank_details").insert(payload).execute()
        except Exception as e:
            logger.error(f"Error saving bank details for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save bank details.")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save bank details.")
        return BankDetailsResponse(**result.data[0])

    def request_withdrawal(self, user_id: str, request_data: WithdrawalCreate) -> WithdrawalResponse:
        """Validate against balance and bank details before writing anything"""
        wallet = self.get_wallet(user_id)
        if request_data.amount > wallet.balance:
            raise HTTPException(status_code=400, detail="You cannot withdraw more than your current balance.")
        bank = self.get_bank_details(user_id)
        if not bank:
            raise HTTPException(
                status_code=400,
                detail="Please save your bank details before submitting a withdrawal request."
            )
        try:
            result = self.supabase.table("withdrawal_requests").insert({
                "user_id": user_id,
                "amount": request_data.amount,
                "status": WITHDRAWAL_PENDING,
                "bank_details_id": bank.id,
            }).execute()
        except Exception as e:
            logger.error(f"Error submitting withdrawal request for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to submit withdrawal request.")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to submit withdrawal request.")
        logger.info(f"Member {user_id} requested withdrawal of {request_data.amount}")
        return WithdrawalResponse(**result.data[0])

    def list_user_requests(self, user_id: str, status: Optional[str] = None) -> List[WithdrawalResponse]:
        try:
            query = self.supabase.table("withdrawal_requests")\
                .select("*")\
                .eq("user_id", user_id)
            if status:
                query = query.eq("status", status)
            result = query.order("requested_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Error fetching withdrawal requests for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch withdrawal requests.")
        return [WithdrawalResponse(**r) for r in result.data or []]

    def list_requests(self, status: str = WITHDRAWAL_PENDING) -> List[WithdrawalResponse]:
        """Admin listing with bank details and requester profile attached"""
        order_column = "requested_at" if status == WITHDRAWAL_PENDING else "processed_at"
        try:
            rows = self.supabase.table("withdrawal_requests")\
                .select("*")\
                .eq("status", status)\
                .order(order_column, desc=True)\
                .execute().data or []
            bank_ids = list({r["bank_details_id"] for r in rows if r.get("bank_details_id")})
            user_ids = list({r["user_id"] for r in rows})
            banks: Dict[str, dict] = {}
            profiles: Dict[str, dict] = {}
            if bank_ids:
                result = self.supabase.table("bank_details").select("*").in_("id", bank_ids).execute()
                banks = {b["id"]: b for b in result.data or []}
            if user_ids:
                result = self.supabase.table("profiles")\
                    .select("id, first_name, last_name, email")\
                    .in_("id", user_ids)\
                    .execute()
                profiles = {p["id"]: p for p in result.data or []}
        except Exception as e:
            logger.error(f"Error fetching {status} withdrawal requests: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to fetch {status} withdrawal requests.")

        responses = []
        for row in rows:
            bank = banks.get(row.get("bank_details_id"))
            profile = profiles.get(row["user_id"], {})
            responses.append(WithdrawalResponse(
                **row,
                bank_details=BankDetailsResponse(**bank) if bank else None,
                first_name=profile.get("first_name"),
                last_name=profile.get("last_name"),
                email=profile.get("email"),
            ))
        return responses

    def _get_pending(self, request_id: str) -> dict:
        try:
            result = self.supabase.table("withdrawal_requests")\
                .select("*")\
                .eq("id", request_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Withdrawal request not found")
        if result.data[0].get("status") != WITHDRAWAL_PENDING:
            raise HTTPException(status_code=400, detail="Withdrawal request has already been processed")
        return result.data[0]

    def _set_status(self, request_id: str, status: str, admin_id: Optional[str]) -> dict:
        result = self.supabase.table("withdrawal_requests")\
            .update({
                "status": status,
                "processed_at": datetime.now(timezone.utc).isoformat() if admin_id else None,
                "admin_id": admin_id,
            })\
            .eq("id", request_id)\
            .execute()
        return result.data[0] if result.data else {}

    def approve(self, request_id: str, admin_id: str) -> WithdrawalResponse:
        """Approve, then debit the wallet. A failed debit puts the request back to pending."""
        request = self._get_pending(request_id)
        try:
            updated = self._set_status(request_id, WITHDRAWAL_APPROVED, admin_id)
        except Exception as e:
            logger.error(f"Error approving withdrawal {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to approve withdrawal request.")

        try:
            self.supabase.rpc("decrement_balance", {
                "user_id": request["user_id"],
                "amount": request["amount"],
            }).execute()
        except Exception as e:
            logger.error(f"Error deducting withdrawal {request_id} from wallet: {e}")
            try:
                self._set_status(request_id, WITHDRAWAL_PENDING, None)
            except Exception as inner:
                logger.error(f"Withdrawal {request_id} left approved without a debit: {inner}")
            raise HTTPException(status_code=500, detail="Failed to deduct amount from user wallet.")

        logger.info(f"Admin {admin_id} approved withdrawal {request_id} of {request['amount']}")
        return WithdrawalResponse(**{**request, **updated})

    def deny(self, request_id: str, admin_id: str) -> WithdrawalResponse:
        request = self._get_pending(request_id)
        try:
            updated = self._set_status(request_id, WITHDRAWAL_DENIED, admin_id)
        except Exception as e:
            logger.error(f"Error denying withdrawal {request_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to deny withdrawal request.")
        logger.info(f"Admin {admin_id} denied withdrawal {request_id}")
        return WithdrawalResponse(**{**request, **updated})
