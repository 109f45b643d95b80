"""
Status -> CSS class tables for the admin UI.

Each enum has its own table covering every member. Looking up a status that
is not in the table raises instead of falling back to a default badge.
"""
import enum
from typing import Union

from app.models.meeting import MeetingStatus
from app.models.meeting_minutes import MinutesStatus
from app.models.task import TaskPriority, TaskStatus

MEETING_STATUS_BADGES: dict[MeetingStatus, str] = {
    MeetingStatus.SCHEDULED: "ns-badge-info",
    MeetingStatus.COMPLETED: "ns-badge-success",
    MeetingStatus.CANCELLED: "ns-badge-danger",
    MeetingStatus.ARCHIVED: "ns-badge-neutral",
}

MINUTES_STATUS_BADGES: dict[MinutesStatus, str] = {
    MinutesStatus.DRAFT: "ns-badge-warning",
    MinutesStatus.APPROVED: "ns-badge-success",
}

TASK_STATUS_BADGES: dict[TaskStatus, str] = {
    TaskStatus.NOT_STARTED: "ns-badge-neutral",
    TaskStatus.IN_PROGRESS: "ns-badge-info",
    TaskStatus.COMPLETED: "ns-badge-success",
    TaskStatus.CANCELLED: "ns-badge-danger",
}

TASK_PRIORITY_BADGES: dict[TaskPriority, str] = {
    TaskPriority.LOW: "ns-badge-neutral",
    TaskPriority.MEDIUM: "ns-badge-info",
    TaskPriority.HIGH: "ns-badge-warning",
    TaskPriority.URGENT: "ns-badge-danger",
}

_TABLES: dict[type, dict] = {
    MeetingStatus: MEETING_STATUS_BADGES,
    MinutesStatus: MINUTES_STATUS_BADGES,
    TaskStatus: TASK_STATUS_BADGES,
    TaskPriority: TASK_PRIORITY_BADGES,
}


class UnknownStatusError(KeyError):
    pass


def badge_class(enum_type: type[enum.Enum], value: Union[enum.Enum, str]) -> str:
    """Return the CSS class for ``value`` of ``enum_type``.

    Raises UnknownStatusError for values outside the enum or enums without a table.
    """
    table = _TABLES.get(enum_type)
    if table is None:
        raise UnknownStatusError(f"No badge table for {enum_type.__name__}")
    try:
        member = enum_type(value)
    except ValueError as exc:
        raise UnknownStatusError(f"Unknown {enum_type.__name__}: {value!r}") from exc
    return table[member]


def all_badges() -> dict[str, dict[str, str]]:
    """Every table keyed by enum name, for the client-side renderer."""
    return {
        enum_type.__name__: {member.value: css for member, css in table.items()}
        for enum_type, table in _TABLES.items()
    }
