"""
Meeting minutes schemas.
"""
from typing import Optional
from pydantic import BaseModel
from datetime import datetime


class MinutesSave(BaseModel):
    content: str
    minutes_id: Optional[int] = None


class MinutesResponse(BaseModel):
    id: int
    meeting_id: int
    content: str
    status: str
    status_badge: str
    version: int
    created_by_id: Optional[int] = None
    approved_by_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True
