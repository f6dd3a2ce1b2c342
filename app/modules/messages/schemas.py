from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class MessageCreate(BaseModel):
    user_id: str
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)


class MessageResponse(BaseModel):
    id: str
    user_id: str
    title: str
    body: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
