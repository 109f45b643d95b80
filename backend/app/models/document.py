"""
Document model.
"""
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Text, Integer, Boolean, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.document_share import DocumentShare
    from app.models.user import User


class DocumentFileType(str, enum.Enum):
    """File type category."""
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    IMAGE = "image"
    OTHER = "other"


class Document(BaseModel):
    """Document metadata. The file itself lives at file_url."""
    __tablename__ = "documents"

    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Metadata
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    file_type: Mapped[DocumentFileType] = mapped_column(
        Enum(DocumentFileType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=DocumentFileType.OTHER
    )
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    file_url: Mapped[str] = mapped_column(String(500), nullable=False)

    # Listed in the public portal
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Uploader
    uploaded_by_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="documents"
    )
    uploaded_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[uploaded_by_id]
    )
    shares: Mapped[list["DocumentShare"]] = relationship(
        "DocumentShare",
        back_populates="document",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Document {self.name}>"
