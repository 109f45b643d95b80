"""
Agenda item model.
"""
from typing import Optional, TYPE_CHECKING
from sqlalchemy import String, Text, Integer, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum
from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.meeting import Meeting
    from app.models.user import User


class AgendaItemType(str, enum.Enum):
    """Agenda item type."""
    CALL_TO_ORDER = "call_to_order"
    APPROVAL_OF_MINUTES = "approval_of_minutes"
    DISCUSSION = "discussion"
    VOTE = "vote"
    REPORT = "report"
    PRESENTATION = "presentation"
    NEW_BUSINESS = "new_business"
    ADJOURNMENT = "adjournment"
    ACTION_ITEM = "action_item"


class AgendaItem(BaseModel):
    """Agenda item within a meeting, ordered by a dense sort_order."""
    __tablename__ = "agenda_items"

    meeting_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    item_type: Mapped[AgendaItemType] = mapped_column(
        Enum(AgendaItemType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=AgendaItemType.DISCUSSION
    )

    presenter_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Duration estimate in minutes
    time_allocated: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Ordering
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)

    # Relationships
    meeting: Mapped["Meeting"] = relationship(
        "Meeting",
        back_populates="agenda_items"
    )
    presenter: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[presenter_id]
    )

    def __repr__(self) -> str:
        return f"<AgendaItem {self.sort_order}: {self.title}>"
