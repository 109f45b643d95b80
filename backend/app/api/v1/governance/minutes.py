"""
Meeting minutes endpoints for the Governance module - v1 API.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.core.badges import badge_class
from app.core.deps import get_current_user
from app.core.permissions import Capability
from app.models.user import User
from app.models.meeting_minutes import MeetingMinutes, MinutesStatus
from app.schemas.meeting_minutes import MinutesSave, MinutesResponse
from app.services import meetings as meeting_service

router = APIRouter()


def minutes_to_response(minutes: MeetingMinutes) -> MinutesResponse:
    """Convert MeetingMinutes model to response schema."""
    return MinutesResponse(
        id=minutes.id,
        meeting_id=minutes.meeting_id,
        content=minutes.content,
        status=minutes.status.value,
        status_badge=badge_class(MinutesStatus, minutes.status),
        version=minutes.version,
        created_by_id=minutes.created_by_id,
        approved_by_id=minutes.approved_by_id,
        approved_at=minutes.approved_at,
        created=minutes.created,
        updated=minutes.updated,
    )


@router.get("/by-meeting/{meeting_id}", response_model=MinutesResponse)
async def get_meeting_minutes(
    meeting_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await meeting_service.get_meeting_for(db, current_user, meeting_id, Capability.VIEW_MEETINGS)
    minutes = await meeting_service.get_minutes(db, meeting_id)
    return minutes_to_response(minutes)


@router.put("/by-meeting/{meeting_id}", response_model=MinutesResponse)
async def save_meeting_minutes(
    meeting_id: int,
    payload: MinutesSave,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create or update the minutes of a meeting."""
    minutes = await meeting_service.save_minutes(
        db, current_user, meeting_id, payload.content, payload.minutes_id
    )
    return minutes_to_response(minutes)


@router.post("/{minutes_id}/approve", response_model=MinutesResponse)
async def approve_meeting_minutes(
    minutes_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Approve draft minutes. Approved minutes are final."""
    minutes = await meeting_service.approve_minutes(db, current_user, minutes_id)
    return minutes_to_response(minutes)
