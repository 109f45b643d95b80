"""
Beta feedback model.
"""
from typing import Optional
from sqlalchemy import String, Text, Integer, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column
import enum
from app.models.base import BaseModel


class FeedbackType(str, enum.Enum):
    BUG = "bug"
    FEATURE_REQUEST = "feature_request"
    IMPROVEMENT = "improvement"
    QUESTION = "question"
    OTHER = "other"


class FeedbackPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BetaFeedback(BaseModel):
    """Feedback submitted from the admin UI."""
    __tablename__ = "beta_feedback"

    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    feedback_type: Mapped[FeedbackType] = mapped_column(
        Enum(FeedbackType, values_callable=lambda x: [e.value for e in x]),
        nullable=False
    )
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    screenshot_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Client fingerprint
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    browser: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    os: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="new")
    priority: Mapped[FeedbackPriority] = mapped_column(
        Enum(FeedbackPriority, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=FeedbackPriority.MEDIUM
    )

    def __repr__(self) -> str:
        return f"<BetaFeedback {self.feedback_type}: {self.subject}>"
