"""
Tests for the sliding-window rate limiter.
"""
import pytest

from app.core.exceptions import RateLimitExceeded
from app.core.rate_limit import RateLimiter

LIMITS = {"ajax_general": (3, 60), "ajax_export": (1, 10)}


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(limits=LIMITS, clock=clock)


def test_allows_up_to_limit(limiter):
    for _ in range(3):
        limiter.check("user_1", "approve_minutes")
    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.check("user_1", "approve_minutes")
    assert exc_info.value.status_code == 429
    assert exc_info.value.retry_after == pytest.approx(60.0)


def test_window_slides(limiter, clock):
    limiter.check("user_1", "approve_minutes")
    clock.now += 30
    limiter.check("user_1", "approve_minutes")
    limiter.check("user_1", "approve_minutes")

    clock.now += 31  # first call has left the window
    limiter.check("user_1", "approve_minutes")
    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.check("user_1", "approve_minutes")
    assert exc_info.value.retry_after == pytest.approx(29.0)


def test_keys_are_per_user_and_action(limiter):
    limiter.check("user_1", "export_agenda_pdf", "ajax_export")
    limiter.check("user_2", "export_agenda_pdf", "ajax_export")
    limiter.check("user_1", "export_minutes_pdf", "ajax_export")
    with pytest.raises(RateLimitExceeded):
        limiter.check("user_1", "export_agenda_pdf", "ajax_export")


def test_unknown_class_uses_general_limits(limiter):
    for _ in range(3):
        limiter.check("user_1", "something", "ajax_mystery")
    with pytest.raises(RateLimitExceeded):
        limiter.check("user_1", "something", "ajax_mystery")


def test_reset(limiter):
    limiter.check("user_1", "export_agenda_pdf", "ajax_export")
    limiter.reset()
    limiter.check("user_1", "export_agenda_pdf", "ajax_export")


def test_idle_keys_are_dropped(limiter, clock):
    limiter.check("user_1", "approve_minutes")
    limiter.check("user_2", "export_agenda_pdf", "ajax_export")
    assert limiter.tracked_keys == 2

    clock.now += 61
    limiter.check("user_3", "approve_minutes")
    assert limiter.tracked_keys == 1


def test_cleanup_keeps_active_keys(limiter, clock):
    limiter.check("user_1", "approve_minutes")
    clock.now += 30
    limiter.check("user_2", "approve_minutes")

    clock.now += 31
    limiter.cleanup_expired_entries()
    assert limiter.tracked_keys == 1
    # user_2's call is still inside the window
    for _ in range(2):
        limiter.check("user_2", "approve_minutes")
    with pytest.raises(RateLimitExceeded):
        limiter.check("user_2", "approve_minutes")
