"""
Domain errors raised by the service layer.

Routers never build these responses by hand: REST endpoints rely on the
handler registered in ``app.main`` and the AJAX dispatcher turns them into
``{"success": false, "data": {"message": ...}}``.
"""
import enum
from typing import Optional


class AppError(Exception):
    """Base class for expected, user-facing failures."""
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Missing or malformed input."""
    status_code = 400


class PermissionDenied(AppError):
    """Caller lacks the capability for this action."""
    status_code = 403


class NotFoundError(AppError):
    """Unknown id."""
    status_code = 404


class StateError(AppError):
    """Illegal state transition, e.g. approving minutes twice."""
    status_code = 409


class RateLimitExceeded(AppError):
    status_code = 429

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class DenialReason(str, enum.Enum):
    """Why the document access gate refused a visitor."""
    SHARE_NOT_FOUND = "share_not_found"
    SHARE_EXPIRED = "share_expired"
    WRONG_PASSWORD = "wrong_password"
    INVALID_EMAIL = "invalid_email"
    TOS_NOT_ACCEPTED = "tos_not_accepted"
    DOWNLOAD_NOT_PERMITTED = "download_not_permitted"
    DOWNLOAD_LIMIT_EXCEEDED = "download_limit_exceeded"


DENIAL_MESSAGES: dict[DenialReason, str] = {
    DenialReason.SHARE_NOT_FOUND: "Share link not found or inactive",
    DenialReason.SHARE_EXPIRED: "This share link has expired",
    DenialReason.WRONG_PASSWORD: "Invalid password",
    DenialReason.INVALID_EMAIL: "A valid email address is required",
    DenialReason.TOS_NOT_ACCEPTED: "You must accept the terms of service",
    DenialReason.DOWNLOAD_NOT_PERMITTED: "Downloads are not permitted for this share",
    DenialReason.DOWNLOAD_LIMIT_EXCEEDED: "Download limit reached for this share",
}


class AccessDenied(AppError):
    """Document share gate refused the submission."""
    status_code = 403

    def __init__(self, reason: DenialReason, message: Optional[str] = None):
        super().__init__(message or DENIAL_MESSAGES[reason])
        self.reason = reason
        if reason == DenialReason.SHARE_NOT_FOUND:
            self.status_code = 404
