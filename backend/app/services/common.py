"""
Helpers shared by the service modules.
"""
import enum
from datetime import datetime, timezone
from math import ceil
from typing import NamedTuple, Optional, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ValidationError

E = TypeVar("E", bound=enum.Enum)


def parse_enum(enum_cls: type[E], value, label: str, default: Optional[E] = None) -> E:
    """Coerce ``value`` to ``enum_cls``. Empty values fall back to ``default``."""
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{label} is required")
        return default
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}'. Expected one of: {allowed}")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def clamp_page_size(per_page: Optional[int]) -> int:
    if not per_page:
        return settings.DEFAULT_PAGE_SIZE
    return max(1, min(per_page, settings.MAX_PAGE_SIZE))


class Page(NamedTuple):
    items: list
    page: int
    per_page: int
    total_items: int
    total_pages: int


async def paginate(db: AsyncSession, query: Select, page: int = 1, per_page: Optional[int] = None) -> Page:
    """Run ``query`` for one page, with the total count across all pages."""
    per_page = clamp_page_size(per_page)
    page = max(1, page)

    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total_items = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
    items = list(result.scalars().all())
    total_pages = ceil(total_items / per_page) if total_items > 0 else 1
    return Page(items, page, per_page, total_items, total_pages)
