from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

from app.modules.groups.schemas import GroupResponse


class JoinRequestCreate(BaseModel):
    group_id: str
    contracts_requested: int = Field(default=1, ge=1)


class MarkPaidRequest(BaseModel):
    group_id: str
    user_id: str


class JoinRequestResponse(BaseModel):
    id: str
    user_id: str
    group_id: str
    status: str
    contracts_requested: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    group_number: Optional[str] = None
    group_status: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class MyRequestsResponse(BaseModel):
    requests: List[JoinRequestResponse]
    pending_counts: Dict[str, int]


class WorkflowResult(BaseModel):
    message: str
    contracts: int
    group: GroupResponse
    opened_group: Optional[GroupResponse] = None
