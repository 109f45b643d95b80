"""
Task endpoints - v1 API.
"""
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.core.badges import badge_class
from app.core.deps import get_current_user
from app.core.permissions import Capability, require_capability
from app.models.user import User
from app.models.task import Task, TaskComment, TaskPriority, TaskStatus
from app.schemas.task import (
    TaskFromActionItem, TaskStatusUpdate, TaskCommentCreate,
    TaskResponse, TaskListResponse, TaskCommentResponse
)
from app.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


def task_to_response(task: Task) -> TaskResponse:
    """Convert Task model to TaskResponse schema."""
    return TaskResponse(
        id=task.id,
        organization_id=task.organization_id,
        title=task.title,
        description=task.description,
        assigned_to_id=task.assigned_to_id,
        due_date=task.due_date,
        priority=task.priority.value,
        priority_badge=badge_class(TaskPriority, task.priority),
        status=task.status.value,
        status_badge=badge_class(TaskStatus, task.status),
        completed_at=task.completed_at,
        created_by_id=task.created_by_id,
        source_type=task.source_type,
        meeting_id=task.meeting_id,
        created=task.created,
        updated=task.updated,
    )


def comment_to_response(comment: TaskComment) -> TaskCommentResponse:
    return TaskCommentResponse(
        id=comment.id,
        task_id=comment.task_id,
        user_id=comment.user_id,
        comment=comment.comment,
        created=comment.created,
    )


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    organization_id: int = Query(..., description="Organization to list tasks for"),
    assigned_to: Optional[int] = Query(None, description="Filter by assignee user ID"),
    status_filter: Optional[str] = Query(None, alias="status", description="Status, or comma-separated statuses"),
    priority: Optional[str] = Query(None, description="Filter by priority"),
    meeting_id: Optional[int] = Query(None, description="Tasks created from this meeting"),
    page: int = Query(1, ge=1),
    perPage: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = await task_service.list_tasks(
        db, current_user, organization_id,
        assigned_to_id=assigned_to,
        status=status_filter,
        priority=priority,
        meeting_id=meeting_id,
        page=page,
        per_page=perPage,
    )
    return TaskListResponse(
        page=result.page,
        perPage=result.per_page,
        totalItems=result.total_items,
        totalPages=result.total_pages,
        items=[task_to_response(t) for t in result.items],
    )


@router.get("/mine", response_model=list[TaskResponse])
async def list_my_tasks(
    organization_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Open tasks assigned to the current user."""
    tasks = await task_service.my_tasks(db, current_user, organization_id)
    return [task_to_response(t) for t in tasks]


@router.post("/from-action-item", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task_from_action_item(
    payload: TaskFromActionItem,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = await task_service.create_task_from_action_item(
        db, current_user,
        meeting_id=payload.meeting_id,
        title=payload.title,
        description=payload.description,
        assigned_to_id=payload.assigned_to_id,
        due_date=payload.due_date,
        priority=payload.priority,
    )
    return task_to_response(task)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = await task_service.update_task_status(db, current_user, task_id, payload.status)
    return task_to_response(task)


@router.get("/{task_id}/comments", response_model=list[TaskCommentResponse])
async def list_task_comments(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = await task_service.get_task(db, task_id)
    await require_capability(db, current_user, task.organization_id, Capability.VIEW_MEETINGS)
    comments = await task_service.list_task_comments(db, task.id)
    return [comment_to_response(c) for c in comments]


@router.post("/{task_id}/comments", response_model=TaskCommentResponse, status_code=status.HTTP_201_CREATED)
async def add_task_comment(
    task_id: int,
    payload: TaskCommentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    comment = await task_service.add_task_comment(db, current_user, task_id, payload.comment)
    return comment_to_response(comment)
