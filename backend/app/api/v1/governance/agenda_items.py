"""
Agenda item endpoints for the Governance module - v1 API.
"""
from fastapi import APIRouter, Depends, status, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.core.deps import get_current_user
from app.core.permissions import Capability
from app.models.user import User
from app.models.agenda_item import AgendaItem
from app.schemas.common import MessageResponse
from app.schemas.agenda_item import (
    AgendaItemCreate, AgendaItemUpdate, AgendaItemResponse, AgendaReorderRequest
)
from app.services import meetings as meeting_service

router = APIRouter()


def agenda_item_to_response(item: AgendaItem) -> AgendaItemResponse:
    """Convert AgendaItem model to AgendaItemResponse schema."""
    return AgendaItemResponse(
        id=item.id,
        meeting_id=item.meeting_id,
        title=item.title,
        description=item.description,
        item_type=item.item_type.value,
        presenter_id=item.presenter_id,
        time_allocated=item.time_allocated,
        sort_order=item.sort_order,
        created=item.created,
        updated=item.updated,
    )


@router.get("", response_model=list[AgendaItemResponse])
async def list_agenda_items(
    meeting_id: int = Query(..., description="Meeting whose agenda to list"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Agenda of a meeting in display order."""
    await meeting_service.get_meeting_for(db, current_user, meeting_id, Capability.VIEW_MEETINGS)
    items = await meeting_service.list_agenda_items(db, meeting_id)
    return [agenda_item_to_response(i) for i in items]


@router.post("", response_model=AgendaItemResponse, status_code=status.HTTP_201_CREATED)
async def create_agenda_item(
    item_data: AgendaItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = await meeting_service.add_agenda_item(db, current_user, item_data)
    return agenda_item_to_response(item)


@router.post("/reorder", response_model=MessageResponse)
async def reorder_agenda_items(
    payload: AgendaReorderRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace the agenda order. ``order`` must list every item exactly once."""
    await meeting_service.reorder_agenda(db, current_user, payload.meeting_id, payload.order)
    return MessageResponse(message="Agenda order updated.")


@router.patch("/{item_id}", response_model=AgendaItemResponse)
async def update_agenda_item(
    item_id: int,
    item_data: AgendaItemUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = await meeting_service.update_agenda_item(db, current_user, item_id, item_data)
    return agenda_item_to_response(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_agenda_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await meeting_service.delete_agenda_item(db, current_user, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
