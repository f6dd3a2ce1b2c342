from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class GroupResponse(BaseModel):
    id: str
    group_number: str
    status: str
    total_members: int = 0
    max_members: int = 25
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GroupQuotaResponse(GroupResponse):
    pending_total: int = 0
    approved_total: int = 0
    paid_total: int = 0
    remaining: int = 0
    display_status: str


class GroupMemberResponse(BaseModel):
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    contracts_requested: int
    paid: bool
    paid_at: Optional[datetime] = None
    payment_due: int = 0


class RecomputeResponse(BaseModel):
    group: GroupResponse
    opened_group: Optional[GroupResponse] = None
