from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class WalletResponse(BaseModel):
    user_id: str
    balance: float


class BankDetailsSave(BaseModel):
    bank_name: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    account_holder_name: str = Field(min_length=1)
    swift_code: Optional[str] = None


class BankDetailsResponse(BaseModel):
    id: str
    user_id: str
    bank_name: str
    account_number: str
    account_holder_name: str
    swift_code: Optional[str] = None

    class Config:
        from_attributes = True


class WithdrawalCreate(BaseModel):
    amount: float = Field(gt=0)


class WithdrawalResponse(BaseModel):
    id: str
    user_id: str
    amount: float
    status: str
    bank_details_id: Optional[str] = None
    admin_id: Optional[str] = None
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    bank_details: Optional[BankDetailsResponse] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True
