"""
Beta feedback submitted from the admin UI.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.beta_feedback import BetaFeedback, FeedbackPriority, FeedbackType
from app.models.user import User
from app.services.common import parse_enum

logger = logging.getLogger(__name__)

FEEDBACK_PRIORITIES: dict[FeedbackType, FeedbackPriority] = {
    FeedbackType.BUG: FeedbackPriority.HIGH,
    FeedbackType.FEATURE_REQUEST: FeedbackPriority.MEDIUM,
    FeedbackType.IMPROVEMENT: FeedbackPriority.MEDIUM,
    FeedbackType.QUESTION: FeedbackPriority.LOW,
    FeedbackType.OTHER: FeedbackPriority.LOW,
}

# First match wins. Edge and Chrome both advertise Safari, Edge also advertises Chrome.
_BROWSERS = (
    ("Edg", "Edge"),
    ("Firefox", "Firefox"),
    ("Chrome", "Chrome"),
    ("Safari", "Safari"),
)

# Mobile platforms before the desktop ones whose tokens they also carry.
_OPERATING_SYSTEMS = (
    ("iPhone", "iOS"),
    ("iPad", "iOS"),
    ("Android", "Android"),
    ("Windows", "Windows"),
    ("Mac", "macOS"),
    ("Linux", "Linux"),
)


def _first_match(user_agent: str, table: tuple[tuple[str, str], ...]) -> str:
    for token, name in table:
        if token in user_agent:
            return name
    return "Unknown"


def detect_browser(user_agent: Optional[str]) -> str:
    return _first_match(user_agent or "", _BROWSERS)


def detect_os(user_agent: Optional[str]) -> str:
    return _first_match(user_agent or "", _OPERATING_SYSTEMS)


async def submit_feedback(
    db: AsyncSession,
    user: User,
    message: Optional[str],
    feedback_type: Optional[str] = None,
    category: Optional[str] = None,
    subject: Optional[str] = None,
    screenshot_url: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> BetaFeedback:
    message = (message or "").strip()
    if not message:
        raise ValidationError("Feedback message is required")
    type_enum = parse_enum(FeedbackType, feedback_type, "feedback type", FeedbackType.IMPROVEMENT)

    feedback = BetaFeedback(
        user_id=user.id,
        feedback_type=type_enum,
        category=(category or "").strip() or None,
        subject=(subject or "").strip(),
        message=message,
        screenshot_url=screenshot_url or None,
        user_agent=(user_agent or "")[:500] or None,
        browser=detect_browser(user_agent),
        os=detect_os(user_agent),
        status="new",
        priority=FEEDBACK_PRIORITIES[type_enum],
    )
    db.add(feedback)
    await db.flush()
    logger.info("Feedback %s (%s, %s) submitted by user %s",
                feedback.id, type_enum.value, feedback.priority.value, user.id)
    return feedback
