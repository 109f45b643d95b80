"""
AJAX action dispatcher for the admin UI.

Every action is ``POST /api/ajax/{action}`` with a form-encoded body and a
Bearer token. Responses always have the shape ``{"success": bool, "data": {...}}``.
Failures carry ``data.message`` and the status code of the underlying error
(400 validation, 403 permission, 404 not found, 409 state, 429 rate limit).
"""
import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData

from app.db.base import get_db
from app.core.deps import get_current_user
from app.core.exceptions import AppError, RateLimitExceeded, ValidationError
from app.core.rate_limit import RateLimiter, get_rate_limiter
from app.models.user import User
from app.schemas.agenda_item import AgendaItemCreate, AgendaItemUpdate
from app.services import exports, feedback, meetings, tasks
from app.services.common import as_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ajax", tags=["ajax"])


class AjaxFailure(Exception):
    """Raised out of the dispatcher so the request transaction rolls back.

    The handler registered in ``app.main`` renders it as a JSON envelope.
    """

    def __init__(self, message: str, status_code: int = 400, code: Optional[str] = None,
                 headers: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.headers = headers

    def to_response(self) -> JSONResponse:
        data = {"message": self.message}
        if self.code:
            data["code"] = self.code
        return JSONResponse(
            status_code=self.status_code,
            content={"success": False, "data": data},
            headers=self.headers,
        )


@dataclass
class AjaxContext:
    db: AsyncSession
    user: User
    form: FormData
    request: Request

    def text(self, name: str, default: str = "") -> str:
        value = self.form.get(name)
        return value if isinstance(value, str) else default

    def optional_text(self, name: str) -> Optional[str]:
        value = self.text(name).strip()
        return value or None

    def integer(self, name: str, label: str) -> int:
        value = self.optional_integer(name, label)
        if value is None:
            raise ValidationError(f"Invalid {label}.")
        return value

    def optional_integer(self, name: str, label: str) -> Optional[int]:
        raw = self.text(name).strip()
        if not raw:
            return None
        try:
            value = int(raw)
        except ValueError:
            raise ValidationError(f"Invalid {label}.")
        if value <= 0:
            raise ValidationError(f"Invalid {label}.")
        return value

    def optional_date(self, name: str) -> Optional[date]:
        raw = self.text(name).strip()
        if not raw:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            raise ValidationError("Invalid due date. Use YYYY-MM-DD.")


AjaxHandler = Callable[[AjaxContext], Awaitable[dict]]


@dataclass(frozen=True)
class AjaxAction:
    handler: AjaxHandler
    limit_class: str


ACTIONS: dict[str, AjaxAction] = {}


def ajax_action(name: str, limit_class: str = "ajax_general"):
    """Register a handler under ``name`` with its rate-limit class."""
    def decorator(func: AjaxHandler) -> AjaxHandler:
        ACTIONS[name] = AjaxAction(handler=func, limit_class=limit_class)
        return func
    return decorator


# ============================================================================
# MEETINGS
# ============================================================================

@ajax_action("save_agenda_item", "ajax_write")
async def _save_agenda_item(ctx: AjaxContext) -> dict:
    item_id = ctx.optional_integer("item_id", "item ID")
    fields = {
        "title": ctx.text("title"),
        "description": ctx.optional_text("description"),
        "item_type": ctx.optional_text("item_type"),
        "time_allocated": ctx.optional_integer("time_allocated", "time allocation"),
    }
    if item_id is None:
        item = await meetings.add_agenda_item(
            ctx.db, ctx.user,
            AgendaItemCreate(meeting_id=ctx.integer("meeting_id", "meeting ID"), **fields),
        )
    else:
        # Blank optional fields are left as they are
        changes = {name: value for name, value in fields.items() if value is not None}
        item = await meetings.update_agenda_item(ctx.db, ctx.user, item_id, AgendaItemUpdate(**changes))
    return {"message": "Agenda item saved.", "item_id": item.id}


@ajax_action("delete_agenda_item", "ajax_write")
async def _delete_agenda_item(ctx: AjaxContext) -> dict:
    await meetings.delete_agenda_item(ctx.db, ctx.user, ctx.integer("item_id", "item ID"))
    return {"message": "Agenda item deleted."}


@ajax_action("reorder_agenda_items", "ajax_write")
async def _reorder_agenda_items(ctx: AjaxContext) -> dict:
    meeting_id = ctx.integer("meeting_id", "meeting ID")
    try:
        order = json.loads(ctx.text("order", "[]"))
    except json.JSONDecodeError:
        raise ValidationError("Invalid order data.")
    if not isinstance(order, list) or not all(isinstance(i, int) and not isinstance(i, bool) for i in order):
        raise ValidationError("Invalid order data.")

    await meetings.reorder_agenda(ctx.db, ctx.user, meeting_id, order)
    return {"message": "Agenda order updated."}


@ajax_action("auto_save_minutes", "ajax_autosave")
async def _auto_save_minutes(ctx: AjaxContext) -> dict:
    minutes = await meetings.auto_save_minutes(
        ctx.db, ctx.user,
        meeting_id=ctx.integer("meeting_id", "meeting ID"),
        content=ctx.text("content"),
        minutes_id=ctx.optional_integer("id", "minutes ID"),
    )
    return {
        "message": "Minutes auto-saved.",
        "minutes_id": minutes.id,
        "timestamp": as_utc(minutes.updated).isoformat(),
    }


@ajax_action("approve_minutes", "ajax_write")
async def _approve_minutes(ctx: AjaxContext) -> dict:
    await meetings.approve_minutes(ctx.db, ctx.user, ctx.integer("minutes_id", "minutes ID"))
    return {"message": "Minutes approved successfully."}


@ajax_action("export_agenda_pdf", "ajax_export")
async def _export_agenda(ctx: AjaxContext) -> dict:
    url = await exports.export_agenda(ctx.db, ctx.user, ctx.integer("meeting_id", "meeting ID"))
    return {"message": "Agenda exported successfully.", "url": url}


@ajax_action("export_minutes_pdf", "ajax_export")
async def _export_minutes(ctx: AjaxContext) -> dict:
    url = await exports.export_minutes(ctx.db, ctx.user, ctx.integer("meeting_id", "meeting ID"))
    return {"message": "Minutes exported successfully.", "url": url}


# ============================================================================
# TASKS
# ============================================================================

@ajax_action("create_task_from_action_item", "ajax_write")
async def _create_task_from_action_item(ctx: AjaxContext) -> dict:
    task = await tasks.create_task_from_action_item(
        ctx.db, ctx.user,
        meeting_id=ctx.integer("meeting_id", "meeting ID"),
        title=ctx.text("title"),
        description=ctx.optional_text("description"),
        assigned_to_id=ctx.optional_integer("assigned_to", "assignee"),
        due_date=ctx.optional_date("due_date"),
        priority=ctx.optional_text("priority"),
    )
    return {"message": "Action item created as task successfully.", "task_id": task.id}


@ajax_action("update_task_status", "ajax_write")
async def _update_task_status(ctx: AjaxContext) -> dict:
    await tasks.update_task_status(
        ctx.db, ctx.user, ctx.integer("task_id", "task ID"), ctx.optional_text("status")
    )
    return {"message": "Task status updated."}


@ajax_action("add_task_comment", "ajax_write")
async def _add_task_comment(ctx: AjaxContext) -> dict:
    comment = await tasks.add_task_comment(
        ctx.db, ctx.user, ctx.integer("task_id", "task ID"), ctx.text("comment")
    )
    return {"message": "Comment added.", "comment_id": comment.id}


# ============================================================================
# FEEDBACK
# ============================================================================

@ajax_action("beta_submit_feedback", "ajax_write")
async def _submit_feedback(ctx: AjaxContext) -> dict:
    entry = await feedback.submit_feedback(
        ctx.db, ctx.user,
        message=ctx.text("message"),
        feedback_type=ctx.optional_text("feedback_type"),
        category=ctx.optional_text("category"),
        subject=ctx.text("subject"),
        screenshot_url=ctx.optional_text("screenshot_url"),
        user_agent=ctx.optional_text("user_agent") or ctx.request.headers.get("user-agent"),
    )
    return {"message": "Thank you for your feedback!", "feedback_id": entry.id}


# ============================================================================
# DISPATCH
# ============================================================================

@router.post("/{action}")
async def dispatch_ajax_action(
    action: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    registered = ACTIONS.get(action)
    if registered is None:
        raise AjaxFailure("Unknown action.", 400)

    try:
        limiter.check(f"user_{current_user.id}", action, registered.limit_class)
        form = await request.form()
        data = await registered.handler(AjaxContext(db=db, user=current_user, form=form, request=request))
    except RateLimitExceeded as exc:
        headers = {"Retry-After": str(int(exc.retry_after) + 1)} if exc.retry_after is not None else None
        raise AjaxFailure(exc.message, exc.status_code, code="rate_limit_exceeded", headers=headers) from exc
    except AppError as exc:
        logger.info("AJAX action %s failed for user %s: %s", action, current_user.id, exc.message)
        raise AjaxFailure(exc.message, exc.status_code) from exc
    except PydanticValidationError as exc:
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid input."
        raise AjaxFailure(message, 400) from exc

    return {"success": True, "data": data}
