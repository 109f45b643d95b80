"""
SQLAlchemy models for NonprofitSuite.

Modules:
- Governance: Organizations, meetings, agenda items, minutes
- Tasks: Tasks and comments, including tasks promoted from action items
- Documents: Documents, share links and access logs
- Feedback: Beta feedback from the admin UI
"""
# Core models
from app.models.user import User
from app.models.organization import Organization
from app.models.org_membership import OrgMembership, OrgMembershipRole

# Governance module
from app.models.meeting import Meeting, MeetingStatus, MeetingType
from app.models.agenda_item import AgendaItem, AgendaItemType
from app.models.meeting_minutes import MeetingMinutes, MinutesStatus

# Tasks module
from app.models.task import Task, TaskComment, TaskPriority, TaskStatus

# Documents module
from app.models.document import Document, DocumentFileType
from app.models.document_share import DocumentShare, DocumentAccessLog, AccessType

# Feedback
from app.models.beta_feedback import BetaFeedback, FeedbackType, FeedbackPriority

__all__ = [
    # Core
    "User",
    "Organization",
    "OrgMembership",
    "OrgMembershipRole",
    # Governance
    "Meeting",
    "MeetingStatus",
    "MeetingType",
    "AgendaItem",
    "AgendaItemType",
    "MeetingMinutes",
    "MinutesStatus",
    # Tasks
    "Task",
    "TaskComment",
    "TaskPriority",
    "TaskStatus",
    # Documents
    "Document",
    "DocumentFileType",
    "DocumentShare",
    "DocumentAccessLog",
    "AccessType",
    # Feedback
    "BetaFeedback",
    "FeedbackType",
    "FeedbackPriority",
]
