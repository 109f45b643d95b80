"""
Status badge tables for the admin UI.
"""
from fastapi import APIRouter

from app.core.badges import all_badges

router = APIRouter(prefix="/badges", tags=["ui"])


@router.get("", response_model=dict[str, dict[str, str]])
async def list_badges():
    """Status -> CSS class per enum, keyed by enum name."""
    return all_badges()
