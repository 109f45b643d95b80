"""
Document share access gate.

A share carries a set of enabled gates (password, email, terms of service).
Each visitor submission is evaluated from scratch against the share-level
checks, then every enabled gate in a fixed order; the first failing check
decides the denial reason. Nothing is remembered between attempts: a
successful evaluation hands the visitor a signed grant instead.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select, update, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.core.config import settings
from app.core.exceptions import AccessDenied, DenialReason
from app.core.security import generate_share_token, get_password_hash, verify_password
from app.models.document import Document
from app.models.document_share import AccessType, DocumentAccessLog, DocumentShare
from app.models.user import User
from app.schemas.document import ShareCreate
from app.services.common import as_utc
from app.services.documents import get_document_for

logger = logging.getLogger(__name__)


class Gate(str, enum.Enum):
    PASSWORD = "password"
    EMAIL = "email"
    TOS = "tos"


# Evaluation order
GATE_ORDER = (Gate.PASSWORD, Gate.EMAIL, Gate.TOS)


@dataclass
class AccessSubmission:
    """What the visitor typed into the access form."""
    password: Optional[str] = None
    email: Optional[str] = None
    tos_accepted: bool = False


@dataclass
class ClientInfo:
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass
class AccessGrant:
    share_id: int
    document_id: int
    visitor_email: Optional[str]
    download: bool
    print: bool
    watermark_text: Optional[str]
    max_downloads_remaining: Optional[int]


def enabled_gates(share: DocumentShare) -> list[Gate]:
    flags = {
        Gate.PASSWORD: bool(share.password_hash),
        Gate.EMAIL: bool(share.require_email),
        Gate.TOS: bool(share.require_tos_acceptance),
    }
    return [gate for gate in GATE_ORDER if flags[gate]]


def _check_password(share: DocumentShare, submission: AccessSubmission) -> None:
    if not submission.password or not verify_password(submission.password, share.password_hash):
        raise AccessDenied(DenialReason.WRONG_PASSWORD)


def _check_email(share: DocumentShare, submission: AccessSubmission) -> None:
    if not submission.email:
        raise AccessDenied(DenialReason.INVALID_EMAIL)
    try:
        validate_email(submission.email, check_deliverability=False)
    except EmailNotValidError:
        raise AccessDenied(DenialReason.INVALID_EMAIL)


def _check_tos(share: DocumentShare, submission: AccessSubmission) -> None:
    if not submission.tos_accepted:
        raise AccessDenied(DenialReason.TOS_NOT_ACCEPTED)


GATE_CHECKS: dict[Gate, Callable[[DocumentShare, AccessSubmission], None]] = {
    Gate.PASSWORD: _check_password,
    Gate.EMAIL: _check_email,
    Gate.TOS: _check_tos,
}


def downloads_remaining(share: DocumentShare) -> Optional[int]:
    if share.max_downloads is None:
        return None
    return max(0, share.max_downloads - share.current_downloads)


def share_url(share: DocumentShare) -> str:
    return f"{settings.SITE_URL.rstrip('/')}/documents/share/{share.share_token}"


# ============================================================================
# SHARE MANAGEMENT
# ============================================================================

async def create_share(db: AsyncSession, user: User, document_id: int, options: ShareCreate) -> DocumentShare:
    document = await get_document_for(db, user, document_id)

    share = DocumentShare(
        document_id=document.id,
        organization_id=document.organization_id,
        share_token=generate_share_token(),
        share_name=options.share_name,
        password_hash=get_password_hash(options.password) if options.password else None,
        require_email=options.require_email,
        require_tos_acceptance=options.require_tos_acceptance,
        permissions=options.permissions.model_dump(),
        max_downloads=options.max_downloads,
        current_downloads=0,
        expires_at=options.expires_at,
        watermark_text=options.watermark_text,
        is_active=True,
        created_by_id=user.id,
    )
    db.add(share)
    await db.flush()
    logger.info("Share %s created for document %s", share.id, document.id)
    return share


async def list_shares(db: AsyncSession, user: User, document_id: int) -> list[DocumentShare]:
    await get_document_for(db, user, document_id)
    result = await db.execute(
        select(DocumentShare)
        .where(DocumentShare.document_id == document_id)
        .order_by(DocumentShare.created.desc(), DocumentShare.id.desc())
    )
    return list(result.scalars().all())


async def get_share_by_token(db: AsyncSession, token: str) -> DocumentShare:
    """Active share for ``token``; unknown and inactive shares look the same."""
    result = await db.execute(
        select(DocumentShare).where(
            DocumentShare.share_token == token,
            DocumentShare.is_active == True,  # noqa: E712
        )
    )
    share = result.scalar_one_or_none()
    if share is None:
        raise AccessDenied(DenialReason.SHARE_NOT_FOUND)
    return share


async def get_shared_document(db: AsyncSession, share: DocumentShare) -> Document:
    result = await db.execute(select(Document).where(Document.id == share.document_id))
    document = result.scalar_one_or_none()
    if document is None:
        raise AccessDenied(DenialReason.SHARE_NOT_FOUND)
    return document


# ============================================================================
# EVALUATION
# ============================================================================

def check_share_usable(share: DocumentShare) -> None:
    if not share.is_active:
        raise AccessDenied(DenialReason.SHARE_NOT_FOUND)
    expires_at = as_utc(share.expires_at)
    if expires_at is not None and expires_at <= datetime.now(timezone.utc):
        raise AccessDenied(DenialReason.SHARE_EXPIRED)


def check_download_allowed(share: DocumentShare) -> None:
    if not share.has_permission("download"):
        raise AccessDenied(DenialReason.DOWNLOAD_NOT_PERMITTED)
    remaining = downloads_remaining(share)
    if remaining is not None and remaining <= 0:
        raise AccessDenied(DenialReason.DOWNLOAD_LIMIT_EXCEEDED)


def evaluate_gates(
    share: DocumentShare,
    submission: AccessSubmission,
    scope: AccessType = AccessType.VIEW,
) -> AccessGrant:
    """Pure evaluation of one submission. Raises AccessDenied on the first failure."""
    check_share_usable(share)
    for gate in enabled_gates(share):
        GATE_CHECKS[gate](share, submission)
    if scope == AccessType.DOWNLOAD:
        check_download_allowed(share)

    return AccessGrant(
        share_id=share.id,
        document_id=share.document_id,
        visitor_email=submission.email if share.require_email else None,
        download=share.has_permission("download"),
        print=share.has_permission("print"),
        watermark_text=share.watermark_text,
        max_downloads_remaining=downloads_remaining(share),
    )


async def evaluate_access(
    db: AsyncSession,
    share: DocumentShare,
    submission: AccessSubmission,
    scope: AccessType = AccessType.VIEW,
    client: Optional[ClientInfo] = None,
) -> AccessGrant:
    """Evaluate a submission and log the access when it is granted."""
    try:
        grant = evaluate_gates(share, submission, scope)
    except AccessDenied as exc:
        logger.warning("Access to share %s denied: %s", share.id, exc.reason.value)
        raise

    await log_access(
        db,
        share,
        access_type=scope,
        visitor_email=grant.visitor_email,
        accepted_tos=submission.tos_accepted,
        client=client,
    )
    logger.info("Access to share %s granted (%s)", share.id, scope.value)
    return grant


async def log_access(
    db: AsyncSession,
    share: DocumentShare,
    access_type: AccessType,
    visitor_email: Optional[str] = None,
    accepted_tos: bool = False,
    client: Optional[ClientInfo] = None,
) -> DocumentAccessLog:
    client = client or ClientInfo()
    entry = DocumentAccessLog(
        document_id=share.document_id,
        share_id=share.id,
        organization_id=share.organization_id,
        access_type=access_type,
        visitor_email=visitor_email,
        ip_address=client.ip_address,
        user_agent=(client.user_agent or "")[:500] or None,
        accepted_tos=bool(accepted_tos),
    )
    db.add(entry)
    await db.flush()
    return entry


async def record_download(db: AsyncSession, share_id: int) -> Optional[int]:
    """Count one download. Returns the downloads left, None when unlimited.

    A single conditional UPDATE claims the slot, so two concurrent callers
    cannot both take the last one.
    """
    result = await db.execute(
        update(DocumentShare)
        .where(
            DocumentShare.id == share_id,
            or_(
                DocumentShare.max_downloads.is_(None),
                DocumentShare.current_downloads < DocumentShare.max_downloads,
            ),
        )
        .values(current_downloads=DocumentShare.current_downloads + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        exists = (await db.execute(
            select(DocumentShare.id).where(DocumentShare.id == share_id)
        )).scalar_one_or_none()
        if exists is None:
            raise AccessDenied(DenialReason.SHARE_NOT_FOUND)
        logger.warning("Download limit reached for share %s", share_id)
        raise AccessDenied(DenialReason.DOWNLOAD_LIMIT_EXCEEDED)

    row = (await db.execute(
        select(DocumentShare.current_downloads, DocumentShare.max_downloads)
        .where(DocumentShare.id == share_id)
    )).one()

    # Keep an already loaded share in step with the row
    share = await db.get(DocumentShare, share_id)
    if share is not None:
        set_committed_value(share, "current_downloads", row.current_downloads)

    logger.info("Download recorded for share %s (%s used)", share_id, row.current_downloads)
    if row.max_downloads is None:
        return None
    return max(0, row.max_downloads - row.current_downloads)
