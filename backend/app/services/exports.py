"""
Printable agenda and minutes exports.

Documents are rendered to HTML with Jinja2, written under ``EXPORT_DIR`` and
served from ``EXPORT_URL``.
"""
import logging
import secrets
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.permissions import Capability
from app.models.user import User
from app.services.meetings import get_meeting_for, get_minutes, list_agenda_items

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def _write_export(filename: str, html: str) -> str:
    """Write ``html`` to the export directory and return its public URL."""
    export_dir = Path(settings.EXPORT_DIR)
    export_dir.mkdir(parents=True, exist_ok=True)
    target = export_dir / filename
    target.write_text(html, encoding="utf-8")
    logger.info("Export written to %s", target)
    return f"{settings.EXPORT_URL.rstrip('/')}/{filename}"


def _stamp() -> str:
    return f"{datetime.now(timezone.utc):%Y%m%d-%H%M%S}-{secrets.token_hex(4)}"


async def export_agenda(db: AsyncSession, user: User, meeting_id: int) -> str:
    meeting = await get_meeting_for(db, user, meeting_id, Capability.VIEW_MEETINGS)
    items = await list_agenda_items(db, meeting.id)

    html = _env.get_template("agenda_export.html").render(
        meeting=meeting,
        items=items,
        total_minutes=sum(item.time_allocated or 0 for item in items),
        generated_at=datetime.now(timezone.utc),
    )
    return await run_in_threadpool(_write_export, f"agenda-{meeting.id}-{_stamp()}.html", html)


async def export_minutes(db: AsyncSession, user: User, meeting_id: int) -> str:
    meeting = await get_meeting_for(db, user, meeting_id, Capability.VIEW_MEETINGS)
    minutes = await get_minutes(db, meeting.id)

    html = _env.get_template("minutes_export.html").render(
        meeting=meeting,
        minutes=minutes,
        generated_at=datetime.now(timezone.utc),
    )
    return await run_in_threadpool(_write_export, f"minutes-{meeting.id}-v{minutes.version}-{_stamp()}.html", html)
