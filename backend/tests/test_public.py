"""
Tests for the public document share pages.
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.security import create_share_grant
from app.models.document_share import AccessType, DocumentAccessLog
from app.schemas.document import ShareCreate
from app.services import access_gate


@pytest.fixture
def new_share(db_session, test_user, test_document):
    async def _new_share(**options):
        return await access_gate.create_share(db_session, test_user, test_document.id, ShareCreate(**options))
    return _new_share


class TestAccessForm:

    @pytest.mark.asyncio
    async def test_form_lists_enabled_gates(self, client: AsyncClient, new_share):
        share = await new_share(password="pw", require_tos_acceptance=True)
        response = await client.get(f"/documents/share/{share.share_token}")
        assert response.status_code == 200
        assert 'name="password"' in response.text
        assert 'name="tos_accepted"' in response.text
        assert 'name="email"' not in response.text

    @pytest.mark.asyncio
    async def test_unknown_share(self, client: AsyncClient, test_org):
        response = await client.get(f"/documents/share/{'a' * 64}")
        assert response.status_code == 404
        assert "Share link not found" in response.text

    @pytest.mark.asyncio
    async def test_wrong_password_rerenders_form(self, client: AsyncClient, new_share):
        share = await new_share(password="pw", require_email=True)
        response = await client.post(
            f"/documents/share/{share.share_token}",
            data={"password": "guess", "email": "visitor@nonprofit.org"},
        )
        assert response.status_code == 403
        assert "Invalid password" in response.text
        # The email the visitor typed is kept
        assert 'value="visitor@nonprofit.org"' in response.text

    @pytest.mark.asyncio
    async def test_missing_tos_is_denied(self, client: AsyncClient, new_share):
        share = await new_share(require_tos_acceptance=True)
        response = await client.post(f"/documents/share/{share.share_token}", data={})
        assert response.status_code == 403
        assert "terms of service" in response.text

    @pytest.mark.asyncio
    async def test_open_share_shows_viewer(self, client: AsyncClient, db_session, new_share, test_document):
        share = await new_share(watermark_text="DRAFT")
        response = await client.get(f"/documents/share/{share.share_token}")
        assert response.status_code == 200
        assert test_document.file_url in response.text
        assert "DRAFT" in response.text

        entry = (await db_session.execute(select(DocumentAccessLog))).scalar_one()
        assert entry.access_type == AccessType.VIEW


class TestGrantFlow:

    @pytest.mark.asyncio
    async def test_full_gate_then_view_and_download(
        self, client: AsyncClient, db_session, new_share, test_document
    ):
        share = await new_share(
            password="pw", require_email=True, require_tos_acceptance=True, max_downloads=1
        )
        response = await client.post(
            f"/documents/share/{share.share_token}",
            data={"password": "pw", "email": "visitor@nonprofit.org", "tos_accepted": "1"},
            headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.1"},
        )
        assert response.status_code == 303
        viewer_url = response.headers["location"]
        assert viewer_url.startswith(f"/documents/share/{share.share_token}/view?grant=")

        response = await client.get(viewer_url)
        assert response.status_code == 200
        assert test_document.name in response.text
        assert "1 left" in response.text

        grant = viewer_url.split("grant=", 1)[1]
        download_url = f"/documents/share/{share.share_token}/download?grant={grant}"
        response = await client.get(download_url)
        assert response.status_code == 303
        assert response.headers["location"] == test_document.file_url

        response = await client.get(download_url)
        assert response.status_code == 403
        assert "Download limit reached" in response.text

        logs = (await db_session.execute(
            select(DocumentAccessLog).order_by(DocumentAccessLog.id)
        )).scalars().all()
        assert [log.access_type for log in logs] == [AccessType.VIEW, AccessType.DOWNLOAD]
        assert logs[0].ip_address == "198.51.100.4"
        assert logs[1].visitor_email == "visitor@nonprofit.org"

    @pytest.mark.asyncio
    async def test_view_without_valid_grant_goes_back_to_form(self, client: AsyncClient, new_share):
        share = await new_share(password="pw")
        other = await new_share()
        for grant in ("garbage", create_share_grant(other.id)):
            response = await client.get(f"/documents/share/{share.share_token}/view?grant={grant}")
            assert response.status_code == 303
            assert response.headers["location"] == f"/documents/share/{share.share_token}"

    @pytest.mark.asyncio
    async def test_download_not_permitted(self, client: AsyncClient, new_share):
        share = await new_share(permissions={"view": True, "download": False, "print": False})
        grant = create_share_grant(share.id)
        response = await client.get(f"/documents/share/{share.share_token}/download?grant={grant}")
        assert response.status_code == 403
        assert "Downloads are not permitted" in response.text
