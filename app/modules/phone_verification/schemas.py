from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PhoneVerificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Optional[str] = None
    email: Optional[str] = None
    new_phone: Optional[str] = Field(default=None, alias="newPhone")
    code: Optional[str] = None


class PhoneVerificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: Optional[str] = None
    new_phone: Optional[str] = Field(default=None, serialization_alias="newPhone")
