"""
Tests for beta feedback submission.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.exceptions import ValidationError
from app.models.beta_feedback import BetaFeedback, FeedbackPriority, FeedbackType
from app.services import feedback as feedback_service

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
EDGE_WINDOWS = CHROME_WINDOWS + " Edg/120.0.2210.91"
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_1 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Mobile/15E148 Safari/604.1"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
CHROME_ANDROID = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)


@pytest.mark.parametrize("user_agent, browser, os_name", [
    (CHROME_WINDOWS, "Chrome", "Windows"),
    (EDGE_WINDOWS, "Edge", "Windows"),
    (SAFARI_IPHONE, "Safari", "iOS"),
    (FIREFOX_LINUX, "Firefox", "Linux"),
    (CHROME_ANDROID, "Chrome", "Android"),
    ("", "Unknown", "Unknown"),
    (None, "Unknown", "Unknown"),
])
def test_client_detection(user_agent, browser, os_name):
    assert feedback_service.detect_browser(user_agent) == browser
    assert feedback_service.detect_os(user_agent) == os_name


class TestSubmitFeedback:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("feedback_type, priority", [
        ("bug", FeedbackPriority.HIGH),
        ("feature_request", FeedbackPriority.MEDIUM),
        ("question", FeedbackPriority.LOW),
        (None, FeedbackPriority.MEDIUM),
    ])
    async def test_priority_follows_type(self, db_session, test_user, feedback_type, priority):
        entry = await feedback_service.submit_feedback(
            db_session, test_user, message="Agenda drag handle is tiny", feedback_type=feedback_type
        )
        assert entry.priority == priority
        assert entry.status == "new"

    @pytest.mark.asyncio
    async def test_message_required(self, db_session, test_user):
        with pytest.raises(ValidationError):
            await feedback_service.submit_feedback(db_session, test_user, message="   ")

    @pytest.mark.asyncio
    async def test_submit_via_ajax(self, client: AsyncClient, auth_headers: dict, db_session):
        response = await client.post(
            "/api/ajax/beta_submit_feedback",
            data={
                "feedback_type": "bug",
                "category": "minutes",
                "subject": "Autosave",
                "message": "Last-saved stamp did not update",
            },
            headers={**auth_headers, "User-Agent": FIREFOX_LINUX},
        )
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Thank you for your feedback!"

        entry = (await db_session.execute(select(BetaFeedback))).scalar_one()
        assert entry.feedback_type == FeedbackType.BUG
        assert entry.browser == "Firefox"
        assert entry.os == "Linux"
        assert entry.category == "minutes"
