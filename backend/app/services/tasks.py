"""
Task bridge: promote meeting action items to tracked tasks.
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.core.permissions import Capability, is_member, require_capability, user_capabilities
from app.models.task import (
    Task, TaskComment, TaskPriority, TaskStatus,
    OPEN_TASK_STATUSES, TASK_SOURCE_MEETING,
)
from app.models.user import User
from app.services.common import Page, paginate, parse_enum
from app.services.meetings import get_meeting_for

logger = logging.getLogger(__name__)


async def get_task(db: AsyncSession, task_id: int) -> Task:
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if task is None:
        raise NotFoundError("Task not found")
    return task


async def _require_task_access(db: AsyncSession, user: User, task: Task) -> None:
    """Members act on tasks assigned to or created by them; managers on any."""
    capabilities = await user_capabilities(db, user, task.organization_id)
    if Capability.MANAGE_MEETINGS in capabilities:
        return
    if Capability.MANAGE_OWN_TASKS not in capabilities:
        raise PermissionDenied("Insufficient permissions")
    if user.id not in (task.assigned_to_id, task.created_by_id):
        raise PermissionDenied("You can only update your own tasks")


async def create_task_from_action_item(
    db: AsyncSession,
    user: User,
    meeting_id: int,
    title: Optional[str],
    description: Optional[str] = None,
    assigned_to_id: Optional[int] = None,
    due_date: Optional[date] = None,
    priority: Optional[str] = None,
) -> Task:
    """Create a task from a meeting action item. The agenda item is left as is."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("Task title is required")
    priority_enum = parse_enum(TaskPriority, priority, "priority", TaskPriority.MEDIUM)

    meeting = await get_meeting_for(db, user, meeting_id, Capability.MANAGE_OWN_TASKS)

    if assigned_to_id is not None:
        if not await is_member(db, assigned_to_id, meeting.organization_id):
            raise ValidationError("Assignee is not a member of this organization")

    task = Task(
        organization_id=meeting.organization_id,
        title=title,
        description=description,
        assigned_to_id=assigned_to_id,
        due_date=due_date,
        priority=priority_enum,
        status=TaskStatus.NOT_STARTED,
        created_by_id=user.id,
        source_type=TASK_SOURCE_MEETING,
        meeting_id=meeting.id,
    )
    db.add(task)
    await db.flush()
    logger.info("Task %s created from action item of meeting %s", task.id, meeting.id)
    return task


async def update_task_status(db: AsyncSession, user: User, task_id: int, status: Optional[str]) -> Task:
    status_enum = parse_enum(TaskStatus, status, "status")
    task = await get_task(db, task_id)
    await _require_task_access(db, user, task)

    if status_enum == TaskStatus.COMPLETED and task.status != TaskStatus.COMPLETED:
        task.completed_at = datetime.now(timezone.utc)
    elif status_enum != TaskStatus.COMPLETED:
        task.completed_at = None
    task.status = status_enum

    await db.flush()
    return task


async def add_task_comment(db: AsyncSession, user: User, task_id: int, comment: Optional[str]) -> TaskComment:
    comment = (comment or "").strip()
    if not comment:
        raise ValidationError("Comment cannot be empty")

    task = await get_task(db, task_id)
    await require_capability(db, user, task.organization_id, Capability.MANAGE_OWN_TASKS)

    task_comment = TaskComment(task_id=task.id, user_id=user.id, comment=comment)
    db.add(task_comment)
    await db.flush()
    return task_comment


async def list_task_comments(db: AsyncSession, task_id: int) -> list[TaskComment]:
    result = await db.execute(
        select(TaskComment)
        .where(TaskComment.task_id == task_id)
        .order_by(TaskComment.created.asc(), TaskComment.id.asc())
    )
    return list(result.scalars().all())


async def list_tasks(
    db: AsyncSession,
    user: User,
    organization_id: int,
    assigned_to_id: Optional[int] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    meeting_id: Optional[int] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> Page:
    """Tasks of an organization. ``status`` may be a comma-separated list."""
    await require_capability(db, user, organization_id, Capability.VIEW_MEETINGS)

    query = select(Task).where(Task.organization_id == organization_id)
    if assigned_to_id is not None:
        query = query.where(Task.assigned_to_id == assigned_to_id)
    if status:
        statuses = [parse_enum(TaskStatus, s.strip(), "status") for s in status.split(",") if s.strip()]
        if statuses:
            query = query.where(Task.status.in_(statuses))
    if priority:
        query = query.where(Task.priority == parse_enum(TaskPriority, priority, "priority"))
    if meeting_id is not None:
        query = query.where(Task.meeting_id == meeting_id)

    query = query.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.desc())
    return await paginate(db, query, page, per_page)


async def my_tasks(db: AsyncSession, user: User, organization_id: Optional[int] = None) -> list[Task]:
    """Open tasks assigned to the caller, due soonest first."""
    query = select(Task).where(
        Task.assigned_to_id == user.id,
        Task.status.in_(OPEN_TASK_STATUSES),
    )
    if organization_id is not None:
        query = query.where(Task.organization_id == organization_id)
    query = query.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc())
    result = await db.execute(query)
    return list(result.scalars().all())
