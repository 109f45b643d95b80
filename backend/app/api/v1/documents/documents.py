"""
Document endpoints - v1 API.

Share links created here are consumed by the public routes in
``app.api.public``.
"""
from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.document import Document
from app.models.document_share import DocumentShare
from app.schemas.document import (
    DocumentCreate, DocumentResponse, DocumentListResponse,
    ShareCreate, ShareResponse, SharePermissions, DocumentStatistics
)
from app.services import access_gate, documents as document_service

router = APIRouter(prefix="/documents", tags=["documents"])


def document_to_response(document: Document) -> DocumentResponse:
    """Convert Document model to DocumentResponse schema."""
    return DocumentResponse(
        id=document.id,
        organization_id=document.organization_id,
        name=document.name,
        description=document.description,
        file_type=document.file_type.value,
        file_size=document.file_size,
        file_url=document.file_url,
        is_public=document.is_public,
        uploaded_by_id=document.uploaded_by_id,
        created=document.created,
        updated=document.updated,
    )


def share_to_response(share: DocumentShare) -> ShareResponse:
    """Convert DocumentShare model to ShareResponse. The password hash never leaves."""
    return ShareResponse(
        id=share.id,
        document_id=share.document_id,
        organization_id=share.organization_id,
        share_token=share.share_token,
        share_url=access_gate.share_url(share),
        share_name=share.share_name,
        password_protected=bool(share.password_hash),
        require_email=share.require_email,
        require_tos_acceptance=share.require_tos_acceptance,
        permissions=SharePermissions(**(share.permissions or {})),
        max_downloads=share.max_downloads,
        current_downloads=share.current_downloads,
        expires_at=share.expires_at,
        watermark_text=share.watermark_text,
        is_active=share.is_active,
        created=share.created,
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    organization_id: int = Query(...),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    perPage: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = await document_service.list_documents(
        db, current_user, organization_id, search=search, page=page, per_page=perPage
    )
    return DocumentListResponse(
        page=result.page,
        perPage=result.per_page,
        totalItems=result.total_items,
        totalPages=result.total_pages,
        items=[document_to_response(d) for d in result.items],
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    document = await document_service.create_document(db, current_user, document_data)
    return document_to_response(document)


@router.get("/portal", response_model=list[DocumentResponse])
async def document_portal(
    organization_id: int = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Public documents of an organization. No authentication required."""
    documents = await document_service.list_portal_documents(db, organization_id)
    return [document_to_response(d) for d in documents]


@router.post("/{document_id}/shares", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def create_share(
    document_id: int,
    options: ShareCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    share = await access_gate.create_share(db, current_user, document_id, options)
    return share_to_response(share)


@router.get("/{document_id}/shares", response_model=list[ShareResponse])
async def list_shares(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    shares = await access_gate.list_shares(db, current_user, document_id)
    return [share_to_response(s) for s in shares]


@router.get("/{document_id}/statistics", response_model=DocumentStatistics)
async def document_statistics(
    document_id: int,
    period: str = Query("all", description="today, week, month or all"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await document_service.get_document_for(db, current_user, document_id)
    stats = await document_service.document_statistics(db, document_id, period)
    return DocumentStatistics(**stats)
