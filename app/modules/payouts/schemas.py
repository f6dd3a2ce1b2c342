from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime


class HoldingResponse(BaseModel):
    group_id: str
    group_number: Optional[str] = None
    status: str
    contracts: int
    amount_paid: int
    payment_due: int
    active: bool


class GroupPayoutResponse(BaseModel):
    group_id: str
    group_number: Optional[str] = None
    contracts: int
    activated_at: datetime
    cycles_elapsed: int
    monthly_payout: int
    total_paid_to_date: int
    next_payout_date: Optional[date] = None


class HoldingsSummaryResponse(BaseModel):
    user_id: str
    holdings: List[HoldingResponse]
    payouts: List[GroupPayoutResponse]
    deposited_contracts: int
    active_contracts: int
    monthly_payout: int
    total_payouts: int
