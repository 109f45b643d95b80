"""
Documents, the public portal and access statistics.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.permissions import Capability, require_capability
from app.models.document import Document, DocumentFileType
from app.models.document_share import AccessType, DocumentAccessLog
from app.models.user import User
from app.schemas.document import DocumentCreate
from app.services.common import Page, paginate, parse_enum

logger = logging.getLogger(__name__)

STATISTICS_PERIODS = ("today", "week", "month", "all")


async def get_document(db: AsyncSession, document_id: int) -> Document:
    result = await db.execute(select(Document).where(Document.id == document_id))
    document = result.scalar_one_or_none()
    if document is None:
        raise NotFoundError("Document not found")
    return document


async def get_document_for(
    db: AsyncSession,
    user: User,
    document_id: int,
    capability: Capability = Capability.MANAGE_DOCUMENTS,
) -> Document:
    document = await get_document(db, document_id)
    await require_capability(db, user, document.organization_id, capability)
    return document


async def create_document(db: AsyncSession, user: User, data: DocumentCreate) -> Document:
    await require_capability(db, user, data.organization_id, Capability.MANAGE_DOCUMENTS)

    document = Document(
        organization_id=data.organization_id,
        name=data.name.strip(),
        description=data.description,
        file_type=parse_enum(DocumentFileType, data.file_type, "file type", DocumentFileType.OTHER),
        file_size=data.file_size,
        file_url=data.file_url,
        is_public=data.is_public,
        uploaded_by_id=user.id,
    )
    db.add(document)
    await db.flush()
    return document


async def list_documents(
    db: AsyncSession,
    user: User,
    organization_id: int,
    search: Optional[str] = None,
    page: int = 1,
    per_page: Optional[int] = None,
) -> Page:
    await require_capability(db, user, organization_id, Capability.VIEW_MEETINGS)

    query = select(Document).where(Document.organization_id == organization_id)
    if search:
        query = query.where(Document.name.ilike(f"%{search}%"))
    query = query.order_by(Document.created.desc(), Document.id.desc())
    return await paginate(db, query, page, per_page)


async def list_portal_documents(db: AsyncSession, organization_id: int) -> list[Document]:
    """Public documents of an organization, for anonymous visitors."""
    result = await db.execute(
        select(Document)
        .where(Document.organization_id == organization_id, Document.is_public == True)  # noqa: E712
        .order_by(Document.name.asc())
    )
    return list(result.scalars().all())


def _period_start(period: str, now: datetime) -> Optional[datetime]:
    if period == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now - timedelta(days=30)
    return None


async def document_statistics(db: AsyncSession, document_id: int, period: str = "all") -> dict:
    """Views, downloads and distinct visitor IPs over a period.

    Unknown periods count everything.
    """
    if period not in STATISTICS_PERIODS:
        period = "all"

    filters = [DocumentAccessLog.document_id == document_id]
    start = _period_start(period, datetime.now(timezone.utc))
    if start is not None:
        filters.append(DocumentAccessLog.accessed_at >= start)

    async def count_access(access_type: AccessType) -> int:
        result = await db.execute(
            select(func.count(DocumentAccessLog.id))
            .where(*filters, DocumentAccessLog.access_type == access_type)
        )
        return result.scalar() or 0

    unique_visitors = (await db.execute(
        select(func.count(func.distinct(DocumentAccessLog.ip_address))).where(*filters)
    )).scalar() or 0

    return {
        "document_id": document_id,
        "period": period,
        "total_views": await count_access(AccessType.VIEW),
        "total_downloads": await count_access(AccessType.DOWNLOAD),
        "unique_visitors": unique_visitors,
    }
