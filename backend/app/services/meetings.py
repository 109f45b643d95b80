"""
Meeting workflow: meetings, their ordered agenda and their minutes.

Every function works inside the caller's session and only flushes; the
request-scoped ``get_db`` dependency owns the commit.
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StateError, ValidationError
from app.core.permissions import Capability, require_capability
from app.models.agenda_item import AgendaItem, AgendaItemType
from app.models.meeting import Meeting, MeetingStatus, MeetingType
from app.models.meeting_minutes import MeetingMinutes, MinutesStatus
from app.models.user import User
from app.schemas.agenda_item import AgendaItemCreate, AgendaItemUpdate
from app.schemas.meeting import MeetingCreate, MeetingUpdate
from app.services.common import Page, paginate, parse_enum

logger = logging.getLogger(__name__)


# ============================================================================
# MEETINGS
# ============================================================================

async def get_meeting(db: AsyncSession, meeting_id: int) -> Meeting:
    result = await db.execute(select(Meeting).where(Meeting.id == meeting_id))
    meeting = result.scalar_one_or_none()
    if meeting is None:
        raise NotFoundError("Meeting not found")
    return meeting


async def get_meeting_for(
    db: AsyncSession,
    user: User,
    meeting_id: int,
    capability: Capability = Capability.VIEW_MEETINGS,
) -> Meeting:
    """Load a meeting and check the caller's capability in its organization."""
    meeting = await get_meeting(db, meeting_id)
    await require_capability(db, user, meeting.organization_id, capability)
    return meeting


async def create_meeting(db: AsyncSession, user: User, data: MeetingCreate) -> Meeting:
    """Create a meeting. Title and date are required."""
    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Meeting title is required")
    if data.meeting_date is None:
        raise ValidationError("Meeting date is required")

    await require_capability(db, user, data.organization_id, Capability.MANAGE_MEETINGS)

    meeting = Meeting(
        organization_id=data.organization_id,
        title=title,
        meeting_date=data.meeting_date,
        meeting_type=parse_enum(MeetingType, data.meeting_type, "meeting type", MeetingType.BOARD),
        status=parse_enum(MeetingStatus, data.status, "status", MeetingStatus.SCHEDULED),
        location=data.location,
        virtual_url=data.virtual_url,
        description=data.description,
        quorum_required=data.quorum_required,
        created_by_id=user.id,
    )
    db.add(meeting)
    await db.flush()
    logger.info("Meeting %s created in organization %s", meeting.id, meeting.organization_id)
    return meeting


async def update_meeting(db: AsyncSession, user: User, meeting_id: int, data: MeetingUpdate) -> Meeting:
    meeting = await get_meeting_for(db, user, meeting_id, Capability.MANAGE_MEETINGS)

    changes = data.model_dump(exclude_unset=True)
    if "title" in changes:
        title = (changes["title"] or "").strip()
        if not title:
            raise ValidationError("Meeting title is required")
        changes["title"] = title
    if "meeting_date" in changes and changes["meeting_date"] is None:
        raise ValidationError("Meeting date is required")
    if "meeting_type" in changes:
        changes["meeting_type"] = parse_enum(MeetingType, changes["meeting_type"], "meeting type")
    if "status" in changes:
        changes["status"] = parse_enum(MeetingStatus, changes["status"], "status")

    for field, value in changes.items():
        setattr(meeting, field, value)

    await db.flush()
    return meeting


async def list_meetings(
    db: AsyncSession,
    user: User,
    organization_id: int,
    meeting_type: Optional[str] = None,
    status: Optional[str] = None,
    upcoming: bool = False,
    search: Optional[str] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> Page:
    """Meetings of one organization, newest first; upcoming ones soonest first."""
    await require_capability(db, user, organization_id, Capability.VIEW_MEETINGS)

    query = select(Meeting).where(Meeting.organization_id == organization_id)

    if meeting_type:
        query = query.where(Meeting.meeting_type == parse_enum(MeetingType, meeting_type, "meeting type"))
    if status:
        query = query.where(Meeting.status == parse_enum(MeetingStatus, status, "status"))
    if search:
        query = query.where(
            Meeting.title.ilike(f"%{search}%") |
            Meeting.description.ilike(f"%{search}%")
        )

    if upcoming:
        query = query.where(Meeting.meeting_date >= datetime.now(timezone.utc))
        query = query.order_by(Meeting.meeting_date.asc(), Meeting.id.asc())
    else:
        query = query.order_by(Meeting.meeting_date.desc(), Meeting.id.desc())

    return await paginate(db, query, page, per_page)


async def _load_meetings_for_bulk(db: AsyncSession, user: User, ids: Sequence[int]) -> list[Meeting]:
    wanted = set(ids)
    if not wanted:
        raise ValidationError("No meetings selected")
    result = await db.execute(select(Meeting).where(Meeting.id.in_(wanted)))
    meetings = list(result.scalars().all())
    missing = wanted - {m.id for m in meetings}
    if missing:
        raise NotFoundError(f"Meetings not found: {', '.join(str(i) for i in sorted(missing))}")
    for organization_id in {m.organization_id for m in meetings}:
        await require_capability(db, user, organization_id, Capability.MANAGE_MEETINGS)
    return meetings


async def archive_meetings(db: AsyncSession, user: User, ids: Sequence[int]) -> int:
    """Set status ``archived`` on every meeting, or on none of them."""
    meetings = await _load_meetings_for_bulk(db, user, ids)
    for meeting in meetings:
        meeting.status = MeetingStatus.ARCHIVED
    await db.flush()
    logger.info("Archived %d meetings", len(meetings))
    return len(meetings)


async def delete_meetings(db: AsyncSession, user: User, ids: Sequence[int]) -> int:
    """Physically delete meetings together with their agenda and minutes."""
    meetings = await _load_meetings_for_bulk(db, user, ids)
    for meeting in meetings:
        await db.delete(meeting)
    await db.flush()
    logger.info("Deleted %d meetings", len(meetings))
    return len(meetings)


# ============================================================================
# AGENDA
# ============================================================================

async def list_agenda_items(db: AsyncSession, meeting_id: int) -> list[AgendaItem]:
    result = await db.execute(
        select(AgendaItem)
        .where(AgendaItem.meeting_id == meeting_id)
        .order_by(AgendaItem.sort_order.asc(), AgendaItem.id.asc())
    )
    return list(result.scalars().all())


async def get_agenda_item(db: AsyncSession, item_id: int) -> AgendaItem:
    result = await db.execute(select(AgendaItem).where(AgendaItem.id == item_id))
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Agenda item not found")
    return item


async def add_agenda_item(db: AsyncSession, user: User, data: AgendaItemCreate) -> AgendaItem:
    """Append an item at the end of the meeting's agenda."""
    await get_meeting_for(db, user, data.meeting_id, Capability.MANAGE_MEETINGS)

    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Agenda item title is required")

    max_order = (await db.execute(
        select(func.max(AgendaItem.sort_order)).where(AgendaItem.meeting_id == data.meeting_id)
    )).scalar()

    item = AgendaItem(
        meeting_id=data.meeting_id,
        title=title,
        description=data.description,
        item_type=parse_enum(AgendaItemType, data.item_type, "item type", AgendaItemType.DISCUSSION),
        presenter_id=data.presenter_id,
        time_allocated=data.time_allocated,
        sort_order=0 if max_order is None else max_order + 1,
    )
    db.add(item)
    await db.flush()
    return item


async def update_agenda_item(db: AsyncSession, user: User, item_id: int, data: AgendaItemUpdate) -> AgendaItem:
    item = await get_agenda_item(db, item_id)
    await get_meeting_for(db, user, item.meeting_id, Capability.MANAGE_MEETINGS)

    changes = data.model_dump(exclude_unset=True)
    if "title" in changes:
        title = (changes["title"] or "").strip()
        if not title:
            raise ValidationError("Agenda item title is required")
        changes["title"] = title
    if "item_type" in changes:
        changes["item_type"] = parse_enum(AgendaItemType, changes["item_type"], "item type")

    for field, value in changes.items():
        setattr(item, field, value)

    await db.flush()
    return item


async def delete_agenda_item(db: AsyncSession, user: User, item_id: int) -> None:
    """Remove an item and close the gap it leaves in the ordering."""
    item = await get_agenda_item(db, item_id)
    meeting_id = item.meeting_id
    await get_meeting_for(db, user, meeting_id, Capability.MANAGE_MEETINGS)

    await db.delete(item)
    await db.flush()

    for index, remaining in enumerate(await list_agenda_items(db, meeting_id)):
        remaining.sort_order = index
    await db.flush()


async def reorder_agenda(db: AsyncSession, user: User, meeting_id: int, ordered_ids: Sequence[int]) -> None:
    """Rewrite sort_order so each item sits at its index in ``ordered_ids``.

    ``ordered_ids`` must name exactly the meeting's agenda items, each once.
    The agenda rows are locked for the rest of the transaction.
    """
    await get_meeting_for(db, user, meeting_id, Capability.MANAGE_MEETINGS)

    result = await db.execute(
        select(AgendaItem)
        .where(AgendaItem.meeting_id == meeting_id)
        .with_for_update()
    )
    items = {item.id: item for item in result.scalars().all()}

    ordered_ids = list(ordered_ids)
    if len(ordered_ids) != len(set(ordered_ids)):
        raise ValidationError("Agenda order contains duplicate items")
    if set(ordered_ids) != set(items):
        raise ValidationError("Agenda order must list every item of the meeting exactly once")

    for index, item_id in enumerate(ordered_ids):
        items[item_id].sort_order = index

    await db.flush()
    logger.info("Agenda of meeting %s reordered: %s", meeting_id, ordered_ids)


# ============================================================================
# MINUTES
# ============================================================================

async def find_minutes(db: AsyncSession, meeting_id: int) -> Optional[MeetingMinutes]:
    result = await db.execute(select(MeetingMinutes).where(MeetingMinutes.meeting_id == meeting_id))
    return result.scalar_one_or_none()


async def get_minutes(db: AsyncSession, meeting_id: int) -> MeetingMinutes:
    minutes = await find_minutes(db, meeting_id)
    if minutes is None:
        raise NotFoundError("No minutes recorded for this meeting")
    return minutes


async def save_minutes(
    db: AsyncSession,
    user: User,
    meeting_id: int,
    content: str,
    minutes_id: Optional[int] = None,
) -> MeetingMinutes:
    """Create the meeting's minutes or update them in place.

    Saving content identical to what is stored writes nothing and leaves the
    version alone. Approved minutes cannot be changed.
    """
    meeting = await get_meeting_for(db, user, meeting_id, Capability.EDIT_MINUTES)

    if minutes_id is not None:
        result = await db.execute(select(MeetingMinutes).where(MeetingMinutes.id == minutes_id))
        minutes = result.scalar_one_or_none()
        if minutes is None or minutes.meeting_id != meeting.id:
            raise NotFoundError("Minutes not found for this meeting")
    else:
        minutes = await find_minutes(db, meeting.id)

    if minutes is None:
        minutes = MeetingMinutes(
            meeting_id=meeting.id,
            content=content,
            status=MinutesStatus.DRAFT,
            version=1,
            created_by_id=user.id,
        )
        db.add(minutes)
        await db.flush()
        logger.info("Minutes %s created for meeting %s", minutes.id, meeting.id)
        return minutes

    if minutes.is_approved:
        raise StateError("Approved minutes cannot be edited")

    if minutes.content == content:
        return minutes

    minutes.content = content
    minutes.version += 1
    await db.flush()
    return minutes


async def auto_save_minutes(
    db: AsyncSession,
    user: User,
    meeting_id: int,
    content: str,
    minutes_id: Optional[int] = None,
) -> MeetingMinutes:
    """Periodic client-side save. Same rules as a manual save, never approves."""
    return await save_minutes(db, user, meeting_id, content, minutes_id)


async def approve_minutes(db: AsyncSession, user: User, minutes_id: int) -> MeetingMinutes:
    """Move draft minutes to approved. There is no way back."""
    result = await db.execute(
        select(MeetingMinutes)
        .where(MeetingMinutes.id == minutes_id)
        .with_for_update()
    )
    minutes = result.scalar_one_or_none()
    if minutes is None:
        raise NotFoundError("Minutes not found")

    await get_meeting_for(db, user, minutes.meeting_id, Capability.APPROVE_MINUTES)

    if minutes.is_approved:
        raise StateError("Minutes are already approved")

    minutes.status = MinutesStatus.APPROVED
    minutes.approved_by_id = user.id
    minutes.approved_at = datetime.now(timezone.utc)
    await db.flush()
    logger.info("Minutes %s of meeting %s approved by user %s", minutes.id, minutes.meeting_id, user.id)
    return minutes
