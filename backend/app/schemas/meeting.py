"""
Meeting schemas.
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class MeetingCreate(BaseModel):
    """Create meeting request. Title and date are checked by the service."""
    organization_id: int
    title: Optional[str] = Field(None, max_length=300)
    meeting_date: Optional[datetime] = None
    meeting_type: Optional[str] = None
    location: Optional[str] = None
    virtual_url: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    quorum_required: Optional[int] = Field(None, ge=0)


class MeetingUpdate(BaseModel):
    """Update meeting request. Only supplied fields change."""
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    meeting_date: Optional[datetime] = None
    meeting_type: Optional[str] = None
    location: Optional[str] = None
    virtual_url: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    quorum_required: Optional[int] = Field(None, ge=0)


class MeetingResponse(BaseModel):
    id: int
    organization_id: int
    title: str
    meeting_type: str
    meeting_date: datetime
    location: Optional[str] = None
    virtual_url: Optional[str] = None
    description: Optional[str] = None
    status: str
    status_badge: str
    quorum_required: Optional[int] = None
    created_by_id: Optional[int] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class MeetingListResponse(BaseModel):
    page: int
    perPage: int
    totalItems: int
    totalPages: int
    items: list[MeetingResponse]


class MeetingBulkAction(BaseModel):
    """Ids for a bulk archive or delete."""
    ids: list[int] = Field(..., min_length=1)
