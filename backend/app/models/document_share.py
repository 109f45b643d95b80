"""
Document share and access log models.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import String, Integer, Boolean, ForeignKey, DateTime, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.models.base import BaseModel, utcnow

if TYPE_CHECKING:
    from app.models.document import Document
    from app.models.user import User


DEFAULT_SHARE_PERMISSIONS = {"view": True, "download": True, "print": True}


class AccessType(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"


class DocumentShare(BaseModel):
    """Access policy gating one document behind a share link."""
    __tablename__ = "document_shares"

    document_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    share_token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    share_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Gates
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    require_email: Mapped[bool] = mapped_column(Boolean, default=False)
    require_tos_acceptance: Mapped[bool] = mapped_column(Boolean, default=False)

    # {"view": bool, "download": bool, "print": bool}
    permissions: Mapped[dict] = mapped_column(JSON, nullable=False, default=lambda: dict(DEFAULT_SHARE_PERMISSIONS))

    # Limits
    max_downloads: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_downloads: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    watermark_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_by_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Relationships
    document: Mapped["Document"] = relationship(
        "Document",
        back_populates="shares"
    )
    created_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[created_by_id]
    )

    def has_permission(self, name: str) -> bool:
        return bool((self.permissions or {}).get(name, False))

    def __repr__(self) -> str:
        return f"<DocumentShare {self.share_token[:8]} for document {self.document_id}>"


class DocumentAccessLog(BaseModel):
    """One granted view or download."""
    __tablename__ = "document_access_logs"

    document_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    share_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("document_shares.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False
    )
    access_type: Mapped[AccessType] = mapped_column(
        Enum(AccessType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AccessType.VIEW
    )
    visitor_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    accepted_tos: Mapped[bool] = mapped_column(Boolean, default=False)
    accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True
    )

    def __repr__(self) -> str:
        return f"<DocumentAccessLog {self.access_type} document={self.document_id}>"
