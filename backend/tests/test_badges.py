"""
Tests for the status badge tables.
"""
import enum

import pytest

from app.core.badges import UnknownStatusError, all_badges, badge_class
from app.models.meeting import MeetingStatus
from app.models.meeting_minutes import MinutesStatus
from app.models.task import TaskPriority, TaskStatus


@pytest.mark.parametrize("enum_type", [MeetingStatus, MinutesStatus, TaskStatus, TaskPriority])
def test_every_member_has_a_badge(enum_type):
    for member in enum_type:
        assert badge_class(enum_type, member).startswith("ns-badge-")
        assert badge_class(enum_type, member.value) == badge_class(enum_type, member)


def test_unknown_status_raises():
    with pytest.raises(UnknownStatusError):
        badge_class(TaskStatus, "on_hold")


def test_enum_without_table_raises():
    class Color(enum.Enum):
        RED = "red"

    with pytest.raises(UnknownStatusError):
        badge_class(Color, Color.RED)


def test_all_badges_is_keyed_by_enum_name():
    tables = all_badges()
    assert set(tables) == {"MeetingStatus", "MinutesStatus", "TaskStatus", "TaskPriority"}
    assert tables["MinutesStatus"] == {"draft": "ns-badge-warning", "approved": "ns-badge-success"}


@pytest.mark.asyncio
async def test_badges_endpoint(client):
    response = await client.get("/api/v1/badges")
    assert response.status_code == 200
    assert response.json() == all_badges()
    assert response.json()["TaskStatus"]["completed"] == "ns-badge-success"
