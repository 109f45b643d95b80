"""
Meeting minutes model.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import Text, Integer, ForeignKey, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.meeting import Meeting
    from app.models.user import User


class MinutesStatus(str, enum.Enum):
    """Minutes status. Approval is one-way."""
    DRAFT = "draft"
    APPROVED = "approved"


class MeetingMinutes(BaseModel):
    """Meeting minutes document, one per meeting."""
    __tablename__ = "meeting_minutes"

    meeting_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    status: Mapped[MinutesStatus] = mapped_column(
        Enum(MinutesStatus, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=MinutesStatus.DRAFT
    )

    # Bumped on every content change
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_by_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Approval info
    approved_by_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    meeting: Mapped["Meeting"] = relationship(
        "Meeting",
        back_populates="minutes"
    )
    created_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[created_by_id]
    )
    approved_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[approved_by_id]
    )

    @property
    def is_approved(self) -> bool:
        return self.status == MinutesStatus.APPROVED

    def __repr__(self) -> str:
        return f"<MeetingMinutes for meeting {self.meeting_id} v{self.version}>"
