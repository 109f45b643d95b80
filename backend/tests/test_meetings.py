"""
Tests for Meeting API endpoints.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.agenda_item import AgendaItem
from app.models.meeting import Meeting, MeetingStatus
from app.models.meeting_minutes import MeetingMinutes, MinutesStatus
from app.models.org_membership import OrgMembershipRole


class TestMeetingsCRUD:
    """Test Meeting CRUD operations."""

    @pytest.mark.asyncio
    async def test_list_meetings_empty(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await client.get(
            f"/api/v1/governance/meetings?organization_id={test_org.id}",
            headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["totalItems"] == 0
        assert data["items"] == []

    @pytest.mark.asyncio
    async def test_create_meeting(self, client: AsyncClient, auth_headers: dict, test_org):
        """Test creating a meeting with defaults for type and status."""
        response = await client.post(
            "/api/v1/governance/meetings",
            json={
                "organization_id": test_org.id,
                "title": "Board Q1",
                "meeting_date": "2025-03-01T18:00:00Z",
                "location": "Community Hall",
            },
            headers=auth_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Board Q1"
        assert data["meeting_type"] == "board"
        assert data["status"] == "scheduled"
        assert data["status_badge"] == "ns-badge-info"
        assert data["location"] == "Community Hall"

    @pytest.mark.asyncio
    async def test_create_meeting_missing_title(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await client.post(
            "/api/v1/governance/meetings",
            json={"organization_id": test_org.id, "meeting_date": "2025-03-01T18:00:00Z"},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert "title" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_create_meeting_missing_date(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await client.post(
            "/api/v1/governance/meetings",
            json={"organization_id": test_org.id, "title": "No date"},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert "date" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_create_meeting_invalid_type(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await client.post(
            "/api/v1/governance/meetings",
            json={
                "organization_id": test_org.id,
                "title": "Odd meeting",
                "meeting_date": "2025-03-01T18:00:00Z",
                "meeting_type": "picnic",
            },
            headers=auth_headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_and_update_meeting(self, client: AsyncClient, auth_headers: dict, test_meeting):
        response = await client.get(f"/api/v1/governance/meetings/{test_meeting.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Board Q1"

        response = await client.patch(
            f"/api/v1/governance/meetings/{test_meeting.id}",
            json={"status": "completed", "quorum_required": 5},
            headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["status_badge"] == "ns-badge-success"
        assert data["quorum_required"] == 5
        assert data["title"] == "Board Q1"

    @pytest.mark.asyncio
    async def test_get_unknown_meeting(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await client.get("/api/v1/governance/meetings/9999", headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_filters(self, client: AsyncClient, auth_headers: dict, test_org, test_meeting):
        await client.post(
            "/api/v1/governance/meetings",
            json={
                "organization_id": test_org.id,
                "title": "Finance committee",
                "meeting_date": "2025-02-10T17:00:00Z",
                "meeting_type": "committee",
            },
            headers=auth_headers
        )

        response = await client.get(
            f"/api/v1/governance/meetings?organization_id={test_org.id}",
            headers=auth_headers
        )
        titles = [m["title"] for m in response.json()["items"]]
        assert titles == ["Board Q1", "Finance committee"]

        response = await client.get(
            f"/api/v1/governance/meetings?organization_id={test_org.id}&meeting_type=committee",
            headers=auth_headers
        )
        assert [m["title"] for m in response.json()["items"]] == ["Finance committee"]

        response = await client.get(
            f"/api/v1/governance/meetings?organization_id={test_org.id}&search=board",
            headers=auth_headers
        )
        assert response.json()["totalItems"] == 1


class TestMeetingPermissions:

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient, test_org):
        response = await client.get(f"/api/v1/governance/meetings?organization_id={test_org.id}")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_viewer_can_list_but_not_create(
        self, client: AsyncClient, test_org, test_meeting, make_user, auth_headers_for
    ):
        viewer = await make_user(OrgMembershipRole.VIEWER)
        headers = auth_headers_for(viewer)

        response = await client.get(
            f"/api/v1/governance/meetings?organization_id={test_org.id}", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["totalItems"] == 1

        response = await client.post(
            "/api/v1/governance/meetings",
            json={"organization_id": test_org.id, "title": "X", "meeting_date": "2025-04-01T18:00:00Z"},
            headers=headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_non_member_is_rejected(
        self, client: AsyncClient, test_org, test_meeting, make_user, auth_headers_for
    ):
        outsider = await make_user(role=None)
        response = await client.get(
            f"/api/v1/governance/meetings/{test_meeting.id}", headers=auth_headers_for(outsider)
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Not a member of organization"


class TestBulkActions:

    @pytest.mark.asyncio
    async def test_bulk_archive(self, client: AsyncClient, auth_headers: dict, test_meeting, db_session):
        response = await client.post(
            "/api/v1/governance/meetings/bulk-archive",
            json={"ids": [test_meeting.id]},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "1 meeting(s) archived."
        assert test_meeting.status == MeetingStatus.ARCHIVED

    @pytest.mark.asyncio
    async def test_bulk_delete_with_unknown_id_changes_nothing(
        self, client: AsyncClient, auth_headers: dict, test_meeting, db_session
    ):
        response = await client.post(
            "/api/v1/governance/meetings/bulk-delete",
            json={"ids": [test_meeting.id, 9999]},
            headers=auth_headers
        )
        assert response.status_code == 404
        assert "9999" in response.json()["detail"]

        remaining = await db_session.execute(select(func.count(Meeting.id)))
        assert remaining.scalar() == 1

    @pytest.mark.asyncio
    async def test_bulk_delete_removes_agenda_and_minutes(
        self, client: AsyncClient, auth_headers: dict, test_meeting, agenda_items, db_session
    ):
        db_session.add(MeetingMinutes(
            meeting_id=test_meeting.id, content="Opened at 6pm.", status=MinutesStatus.DRAFT, version=1
        ))
        await db_session.flush()

        response = await client.post(
            "/api/v1/governance/meetings/bulk-delete",
            json={"ids": [test_meeting.id]},
            headers=auth_headers
        )
        assert response.status_code == 200

        for model in (Meeting, AgendaItem, MeetingMinutes):
            count = await db_session.execute(select(func.count(model.id)))
            assert count.scalar() == 0

    @pytest.mark.asyncio
    async def test_bulk_action_requires_ids(self, client: AsyncClient, auth_headers: dict, test_org):
        response = await client.post(
            "/api/v1/governance/meetings/bulk-archive",
            json={"ids": []},
            headers=auth_headers
        )
        assert response.status_code == 422
