"""
Meeting endpoints for the Governance module - v1 API.

Endpoints under /api/v1/governance/meetings:
- GET    ""               list an organization's meetings
- POST   ""               create a meeting
- GET    /{meeting_id}    fetch one meeting
- PATCH  /{meeting_id}    update supplied fields
- POST   /bulk-archive    archive several meetings
- POST   /bulk-delete     delete several meetings with agenda and minutes
"""
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.core.badges import badge_class
from app.core.deps import get_current_user
from app.core.permissions import Capability
from app.models.user import User
from app.models.meeting import Meeting, MeetingStatus
from app.schemas.common import MessageResponse
from app.schemas.meeting import (
    MeetingCreate, MeetingUpdate, MeetingResponse,
    MeetingListResponse, MeetingBulkAction
)
from app.services import meetings as meeting_service

router = APIRouter()


def meeting_to_response(meeting: Meeting) -> MeetingResponse:
    """Convert Meeting model to MeetingResponse schema."""
    return MeetingResponse(
        id=meeting.id,
        organization_id=meeting.organization_id,
        title=meeting.title,
        meeting_type=meeting.meeting_type.value,
        meeting_date=meeting.meeting_date,
        location=meeting.location,
        virtual_url=meeting.virtual_url,
        description=meeting.description,
        status=meeting.status.value,
        status_badge=badge_class(MeetingStatus, meeting.status),
        quorum_required=meeting.quorum_required,
        created_by_id=meeting.created_by_id,
        created=meeting.created,
        updated=meeting.updated,
    )


@router.get("", response_model=MeetingListResponse)
async def list_meetings(
    organization_id: int = Query(..., description="Organization to list meetings for"),
    meeting_type: Optional[str] = Query(None, description="Filter by meeting type"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    upcoming: bool = Query(False, description="Only future meetings, soonest first"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    perPage: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List meetings of an organization, most recent first."""
    result = await meeting_service.list_meetings(
        db, current_user, organization_id,
        meeting_type=meeting_type,
        status=status_filter,
        upcoming=upcoming,
        search=search,
        page=page,
        per_page=perPage,
    )
    return MeetingListResponse(
        page=result.page,
        perPage=result.per_page,
        totalItems=result.total_items,
        totalPages=result.total_pages,
        items=[meeting_to_response(m) for m in result.items],
    )


@router.post("", response_model=MeetingResponse, status_code=status.HTTP_201_CREATED)
async def create_meeting(
    meeting_data: MeetingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    meeting = await meeting_service.create_meeting(db, current_user, meeting_data)
    return meeting_to_response(meeting)


@router.post("/bulk-archive", response_model=MessageResponse)
async def bulk_archive_meetings(
    payload: MeetingBulkAction,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    count = await meeting_service.archive_meetings(db, current_user, payload.ids)
    return MessageResponse(message=f"{count} meeting(s) archived.")


@router.post("/bulk-delete", response_model=MessageResponse)
async def bulk_delete_meetings(
    payload: MeetingBulkAction,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    count = await meeting_service.delete_meetings(db, current_user, payload.ids)
    return MessageResponse(message=f"{count} meeting(s) deleted.")


@router.get("/{meeting_id}", response_model=MeetingResponse)
async def get_meeting(
    meeting_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    meeting = await meeting_service.get_meeting_for(db, current_user, meeting_id, Capability.VIEW_MEETINGS)
    return meeting_to_response(meeting)


@router.patch("/{meeting_id}", response_model=MeetingResponse)
async def update_meeting(
    meeting_id: int,
    meeting_data: MeetingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a meeting. Only the supplied fields change."""
    meeting = await meeting_service.update_meeting(db, current_user, meeting_id, meeting_data)
    return meeting_to_response(meeting)
