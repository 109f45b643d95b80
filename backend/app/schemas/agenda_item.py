"""
Agenda item schemas.
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class AgendaItemCreate(BaseModel):
    meeting_id: int
    title: str = Field(..., max_length=300)
    description: Optional[str] = None
    item_type: Optional[str] = None
    presenter_id: Optional[int] = None
    time_allocated: Optional[int] = Field(None, ge=0)


class AgendaItemUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=300)
    description: Optional[str] = None
    item_type: Optional[str] = None
    presenter_id: Optional[int] = None
    time_allocated: Optional[int] = Field(None, ge=0)


class AgendaItemResponse(BaseModel):
    id: int
    meeting_id: int
    title: str
    description: Optional[str] = None
    item_type: str
    presenter_id: Optional[int] = None
    time_allocated: Optional[int] = None
    sort_order: int
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class AgendaReorderRequest(BaseModel):
    """Full agenda of a meeting in its new order."""
    meeting_id: int
    order: list[int]
