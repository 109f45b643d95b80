"""
Task schemas.
"""
from typing import Optional
from pydantic import BaseModel
from datetime import date, datetime


class TaskFromActionItem(BaseModel):
    """Promote a meeting action item to a task."""
    meeting_id: int
    title: str
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[date] = None
    priority: Optional[str] = None


class TaskStatusUpdate(BaseModel):
    status: str


class TaskCommentCreate(BaseModel):
    comment: str


class TaskCommentResponse(BaseModel):
    id: int
    task_id: int
    user_id: Optional[int] = None
    comment: str
    created: datetime

    class Config:
        from_attributes = True


class TaskResponse(BaseModel):
    id: int
    organization_id: int
    title: str
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[date] = None
    priority: str
    priority_badge: str
    status: str
    status_badge: str
    completed_at: Optional[datetime] = None
    created_by_id: Optional[int] = None
    source_type: Optional[str] = None
    meeting_id: Optional[int] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class TaskListResponse(BaseModel):
    page: int
    perPage: int
    totalItems: int
    totalPages: int
    items: list[TaskResponse]
