"""
Meeting model.
"""
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from sqlalchemy import String, Text, Integer, ForeignKey, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.user import User
    from app.models.agenda_item import AgendaItem
    from app.models.meeting_minutes import MeetingMinutes


class MeetingStatus(str, enum.Enum):
    """Meeting status values."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"


class MeetingType(str, enum.Enum):
    """Meeting type values."""
    BOARD = "board"
    COMMITTEE = "committee"
    SPECIAL = "special"
    ANNUAL = "annual"


class Meeting(BaseModel):
    """Meeting model."""
    __tablename__ = "meetings"

    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    meeting_type: Mapped[MeetingType] = mapped_column(
        Enum(MeetingType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=MeetingType.BOARD
    )
    meeting_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    # Venue
    location: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    virtual_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    status: Mapped[MeetingStatus] = mapped_column(
        Enum(MeetingStatus, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=MeetingStatus.SCHEDULED,
        index=True
    )

    quorum_required: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Creator
    created_by_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization",
        back_populates="meetings"
    )
    created_by: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[created_by_id]
    )
    agenda_items: Mapped[list["AgendaItem"]] = relationship(
        "AgendaItem",
        back_populates="meeting",
        cascade="all, delete-orphan",
        order_by="AgendaItem.sort_order"
    )
    minutes: Mapped[Optional["MeetingMinutes"]] = relationship(
        "MeetingMinutes",
        back_populates="meeting",
        uselist=False,
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Meeting {self.title}>"
