"""
Public document share pages. No authentication.

- GET  /documents/share/{token}           access form, or the viewer when the share has no gates
- POST /documents/share/{token}           evaluate the form; redirect to the viewer with a grant
- GET  /documents/share/{token}/view      viewer for a visitor holding a grant
- GET  /documents/share/{token}/download  count a download and redirect to the file
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import get_db
from app.core.exceptions import AccessDenied
from app.core.security import create_share_grant, verify_share_grant
from app.models.document_share import AccessType, DocumentShare
from app.services import access_gate
from app.services.access_gate import AccessSubmission, ClientInfo
from app.services.exports import TEMPLATES_DIR

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents/share", tags=["public-documents"])
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def client_info(request: Request) -> ClientInfo:
    forwarded = request.headers.get("x-forwarded-for", "")
    ip_address = forwarded.split(",")[0].strip() or (request.client.host if request.client else None)
    return ClientInfo(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


def render_form(
    request: Request,
    share: Optional[DocumentShare],
    error: Optional[str] = None,
    email: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    gates = [gate.value for gate in access_gate.enabled_gates(share)] if share is not None else []
    return templates.TemplateResponse(
        request,
        "access_form.html",
        {
            "title": (share.share_name if share is not None and share.share_name else "Shared document"),
            "share": share,
            "gates": gates,
            "error": error,
            "email": email,
        },
        status_code=status_code,
    )


def render_denial(request: Request, share: Optional[DocumentShare], exc: AccessDenied,
                  email: Optional[str] = None) -> HTMLResponse:
    return render_form(request, share, error=exc.message, email=email, status_code=exc.status_code)


async def render_viewer(request: Request, db: AsyncSession, share: DocumentShare,
                        grant: access_gate.AccessGrant, grant_token: str) -> HTMLResponse:
    document = await access_gate.get_shared_document(db, share)
    return templates.TemplateResponse(
        request,
        "viewer.html",
        {"share": share, "document": document, "grant": grant, "grant_token": grant_token},
    )


def _viewer_url(share: DocumentShare, grant_token: str) -> str:
    return f"/documents/share/{share.share_token}/view?grant={grant_token}"


@router.get("/{token}", response_class=HTMLResponse)
async def show_share(token: str, request: Request, db: AsyncSession = Depends(get_db)):
    try:
        share = await access_gate.get_share_by_token(db, token)
    except AccessDenied as exc:
        return render_denial(request, None, exc)

    if access_gate.enabled_gates(share):
        try:
            access_gate.check_share_usable(share)
        except AccessDenied as exc:
            return render_denial(request, share, exc)
        return render_form(request, share)

    try:
        grant = await access_gate.evaluate_access(
            db, share, AccessSubmission(), AccessType.VIEW, client_info(request)
        )
    except AccessDenied as exc:
        return render_denial(request, share, exc)
    return await render_viewer(request, db, share, grant, create_share_grant(share.id))


@router.post("/{token}", response_class=HTMLResponse)
async def submit_share_form(
    token: str,
    request: Request,
    password: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    tos_accepted: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
):
    """Evaluate every configured gate against this one submission."""
    try:
        share = await access_gate.get_share_by_token(db, token)
    except AccessDenied as exc:
        return render_denial(request, None, exc)

    submission = AccessSubmission(
        password=password,
        email=(email or "").strip() or None,
        tos_accepted=bool(tos_accepted),
    )
    try:
        grant = await access_gate.evaluate_access(
            db, share, submission, AccessType.VIEW, client_info(request)
        )
    except AccessDenied as exc:
        return render_denial(request, share, exc, email=submission.email)

    grant_token = create_share_grant(share.id, grant.visitor_email)
    return RedirectResponse(_viewer_url(share, grant_token), status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{token}/view", response_class=HTMLResponse)
async def view_shared_document(
    token: str,
    request: Request,
    grant: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    try:
        share = await access_gate.get_share_by_token(db, token)
        access_gate.check_share_usable(share)
    except AccessDenied as exc:
        return render_denial(request, None, exc)

    claims = verify_share_grant(grant, share.id)
    if claims is None:
        return RedirectResponse(f"/documents/share/{token}", status_code=status.HTTP_303_SEE_OTHER)

    access = access_gate.AccessGrant(
        share_id=share.id,
        document_id=share.document_id,
        visitor_email=claims.get("email"),
        download=share.has_permission("download"),
        print=share.has_permission("print"),
        watermark_text=share.watermark_text,
        max_downloads_remaining=access_gate.downloads_remaining(share),
    )
    return await render_viewer(request, db, share, access, grant)


@router.get("/{token}/download")
async def download_shared_document(
    token: str,
    request: Request,
    grant: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    """Claim one download slot and send the visitor to the file."""
    try:
        share = await access_gate.get_share_by_token(db, token)
    except AccessDenied as exc:
        return render_denial(request, None, exc)

    claims = verify_share_grant(grant, share.id)
    if claims is None:
        return RedirectResponse(f"/documents/share/{token}", status_code=status.HTTP_303_SEE_OTHER)

    try:
        access_gate.check_share_usable(share)
        access_gate.check_download_allowed(share)
        await access_gate.record_download(db, share.id)
    except AccessDenied as exc:
        logger.warning("Download from share %s refused: %s", share.id, exc.reason.value)
        return render_denial(request, None, exc)

    await access_gate.log_access(
        db, share,
        access_type=AccessType.DOWNLOAD,
        visitor_email=claims.get("email"),
        accepted_tos=share.require_tos_acceptance,
        client=client_info(request),
    )
    document = await access_gate.get_shared_document(db, share)
    return RedirectResponse(document.file_url, status_code=status.HTTP_303_SEE_OTHER)
