"""
Governance module.

This module handles:
- Meetings
- Agenda items
- Minutes

All endpoints are under /api/v1/governance/*.
"""
from fastapi import APIRouter

from app.api.v1.governance.meetings import router as meetings_v1_router
from app.api.v1.governance.agenda_items import router as agenda_items_v1_router
from app.api.v1.governance.minutes import router as minutes_v1_router

# Combined governance router for v1 API endpoints
governance_router = APIRouter(prefix="/governance", tags=["governance"])

governance_router.include_router(meetings_v1_router, prefix="/meetings", tags=["meetings-v1"])
governance_router.include_router(agenda_items_v1_router, prefix="/agenda-items", tags=["agenda-items-v1"])
governance_router.include_router(minutes_v1_router, prefix="/minutes", tags=["minutes-v1"])

__all__ = [
    "governance_router",
    "meetings_v1_router",
    "agenda_items_v1_router",
    "minutes_v1_router",
]
