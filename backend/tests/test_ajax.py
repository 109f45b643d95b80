"""
Tests for the admin AJAX dispatcher.
"""
import json
from pathlib import Path

import pytest
from httpx import AsyncClient

from app.main import app
from app.core.rate_limit import RateLimiter, get_rate_limiter
from app.models.meeting_minutes import MinutesStatus
from app.models.org_membership import OrgMembershipRole
from app.models.task import TaskStatus
from app.services import meetings as meeting_service
from app.services import tasks as task_service


async def ajax(client: AsyncClient, action: str, headers: dict, **fields):
    return await client.post(f"/api/ajax/{action}", data=fields, headers=headers)


class TestEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_action(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await ajax(client, "drop_tables", auth_headers)
        assert response.status_code == 400
        assert response.json() == {"success": False, "data": {"message": "Unknown action."}}

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient, test_meeting):
        response = await client.post("/api/ajax/export_agenda_pdf", data={"meeting_id": test_meeting.id})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_id(self, client: AsyncClient, auth_headers: dict, test_meeting):
        response = await ajax(client, "approve_minutes", auth_headers, minutes_id="abc")
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["data"]["message"] == "Invalid minutes ID."

    @pytest.mark.asyncio
    async def test_permission_failure(self, client: AsyncClient, test_meeting, agenda_items, make_user, auth_headers_for):
        viewer = await make_user(OrgMembershipRole.VIEWER)
        response = await ajax(
            client, "reorder_agenda_items", auth_headers_for(viewer),
            meeting_id=test_meeting.id,
            order=json.dumps([item.id for item in agenda_items]),
        )
        assert response.status_code == 403
        assert response.json()["data"]["message"] == "Insufficient permissions"


class TestMeetingActions:

    @pytest.mark.asyncio
    async def test_reorder(self, client: AsyncClient, auth_headers: dict, db_session, test_meeting, agenda_items):
        order = [agenda_items[2].id, agenda_items[0].id, agenda_items[1].id]
        response = await ajax(
            client, "reorder_agenda_items", auth_headers,
            meeting_id=test_meeting.id, order=json.dumps(order),
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {"message": "Agenda order updated."}}

        items = await meeting_service.list_agenda_items(db_session, test_meeting.id)
        assert [item.id for item in items] == order

    @pytest.mark.asyncio
    @pytest.mark.parametrize("order", ["not json", '{"a": 1}', '["1", "2"]', "[true]"])
    async def test_reorder_rejects_bad_payload(
        self, client: AsyncClient, auth_headers: dict, test_meeting, agenda_items, order
    ):
        response = await ajax(client, "reorder_agenda_items", auth_headers, meeting_id=test_meeting.id, order=order)
        assert response.status_code == 400
        assert response.json()["data"]["message"] == "Invalid order data."

    @pytest.mark.asyncio
    async def test_save_and_delete_agenda_item(self, client: AsyncClient, auth_headers: dict, db_session, test_meeting):
        response = await ajax(
            client, "save_agenda_item", auth_headers,
            meeting_id=test_meeting.id, title="Treasurer's report", item_type="report", time_allocated="15",
        )
        assert response.status_code == 200
        item_id = response.json()["data"]["item_id"]

        response = await ajax(client, "save_agenda_item", auth_headers, item_id=item_id, title="Finance report")
        assert response.status_code == 200
        item = await meeting_service.get_agenda_item(db_session, item_id)
        assert item.title == "Finance report"

        response = await ajax(client, "delete_agenda_item", auth_headers, item_id=item_id)
        assert response.status_code == 200
        assert await meeting_service.list_agenda_items(db_session, test_meeting.id) == []

    @pytest.mark.asyncio
    async def test_auto_save_then_approve(self, client: AsyncClient, auth_headers: dict, db_session, test_meeting):
        response = await ajax(
            client, "auto_save_minutes", auth_headers,
            meeting_id=test_meeting.id, content="<p>Draft</p>",
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["message"] == "Minutes auto-saved."
        assert data["timestamp"]
        minutes_id = data["minutes_id"]

        response = await ajax(
            client, "auto_save_minutes", auth_headers,
            meeting_id=test_meeting.id, id=minutes_id, content="<p>Draft, edited</p>",
        )
        assert response.json()["data"]["minutes_id"] == minutes_id

        response = await ajax(client, "approve_minutes", auth_headers, minutes_id=minutes_id)
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Minutes approved successfully."

        response = await ajax(client, "approve_minutes", auth_headers, minutes_id=minutes_id)
        assert response.status_code == 409
        assert response.json()["success"] is False

        minutes = await meeting_service.get_minutes(db_session, test_meeting.id)
        assert minutes.status == MinutesStatus.APPROVED
        assert minutes.version == 2

    @pytest.mark.asyncio
    async def test_exports(self, client: AsyncClient, auth_headers: dict, test_meeting, agenda_items, export_dir: Path):
        response = await ajax(client, "export_agenda_pdf", auth_headers, meeting_id=test_meeting.id)
        assert response.status_code == 200
        url = response.json()["data"]["url"]
        assert url.startswith("/exports/agenda-")

        html = (export_dir / url.rsplit("/", 1)[1]).read_text(encoding="utf-8")
        assert "Board Q1" in html
        assert html.index("Call to order") < html.index("Budget vote")

        response = await ajax(client, "export_minutes_pdf", auth_headers, meeting_id=test_meeting.id)
        assert response.status_code == 404
        assert response.json()["data"]["message"] == "No minutes recorded for this meeting"


class TestTaskActions:

    @pytest.mark.asyncio
    async def test_create_update_comment(self, client: AsyncClient, auth_headers: dict, db_session, test_meeting, make_user):
        assignee = await make_user(OrgMembershipRole.MEMBER)
        response = await ajax(
            client, "create_task_from_action_item", auth_headers,
            meeting_id=test_meeting.id, title="Renew insurance", description="",
            assigned_to=assignee.id, due_date="2025-04-01", priority="high",
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["message"] == "Action item created as task successfully."
        task_id = data["task_id"]

        response = await ajax(client, "update_task_status", auth_headers, task_id=task_id, status="completed")
        assert response.status_code == 200

        response = await ajax(client, "add_task_comment", auth_headers, task_id=task_id, comment="Done via broker.")
        assert response.status_code == 200
        assert response.json()["data"]["comment_id"]

        task = await task_service.get_task(db_session, task_id)
        assert task.status == TaskStatus.COMPLETED
        assert task.assigned_to_id == assignee.id

    @pytest.mark.asyncio
    async def test_unknown_task(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await ajax(client, "update_task_status", auth_headers, task_id="9999", status="completed")
        assert response.status_code == 404
        assert response.json() == {"success": False, "data": {"message": "Task not found"}}

        response = await ajax(client, "add_task_comment", auth_headers, task_id="9999", comment="x")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_bad_due_date(self, client: AsyncClient, auth_headers: dict, test_meeting):
        response = await ajax(
            client, "create_task_from_action_item", auth_headers,
            meeting_id=test_meeting.id, title="Renew insurance", due_date="next week",
        )
        assert response.status_code == 400
        assert "due date" in response.json()["data"]["message"]


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_write_limit_returns_429(self, client: AsyncClient, auth_headers: dict, test_meeting):
        limiter = RateLimiter(limits={
            "ajax_general": (1, 60),
            "ajax_write": (1, 60),
            "ajax_export": (1, 60),
            "ajax_autosave": (1, 60),
        })
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        response = await ajax(client, "auto_save_minutes", auth_headers, meeting_id=test_meeting.id, content="a")
        assert response.status_code == 200

        response = await ajax(client, "auto_save_minutes", auth_headers, meeting_id=test_meeting.id, content="b")
        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["data"]["code"] == "rate_limit_exceeded"
        assert int(response.headers["retry-after"]) >= 1

        # Other actions have their own window
        response = await ajax(client, "export_agenda_pdf", auth_headers, meeting_id=9999)
        assert response.status_code == 404
