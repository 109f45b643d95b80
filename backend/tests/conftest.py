"""
Test configuration and fixtures for NonprofitSuite backend tests.
"""
import os
import pytest
import pytest_asyncio
from datetime import datetime, timezone
from typing import AsyncGenerator, Awaitable, Callable, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.base import Base, get_db
from app.core.config import settings
from app.core.rate_limit import rate_limiter
from app.core.security import get_password_hash, create_access_token
from app.models.user import User
from app.models.organization import Organization
from app.models.org_membership import OrgMembership, OrgMembershipRole
from app.models.meeting import Meeting, MeetingStatus, MeetingType
from app.models.agenda_item import AgendaItem, AgendaItemType
from app.models.document import Document, DocumentFileType


# Use a file-based SQLite DB to avoid :memory: multiple-connection issues
# with SQLAlchemy + aiosqlite (each new connection would see an empty DB).
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()
    # Clean up test database file
    try:
        os.remove("./test.db")
    except OSError:
        pass


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Every test starts with empty rate-limit windows."""
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def export_dir(tmp_path, monkeypatch):
    """Write exports into a temporary directory."""
    monkeypatch.setattr(settings, "EXPORT_DIR", str(tmp_path))
    return tmp_path


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest.fixture
def auth_headers_for() -> Callable[[User], dict]:
    """Build authorization headers for any user."""
    return headers_for


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user. Owns ``test_org``."""
    user = User(
        email="testuser@example.com",
        name="Test User",
        password_hash=get_password_hash("TestPass123"),
        is_superadmin=False,
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Create authorization headers."""
    return headers_for(test_user)


@pytest_asyncio.fixture
async def test_org(db_session: AsyncSession, test_user: User) -> Organization:
    """Create a test organization."""
    org = Organization(
        name="Test Organization",
        description="A test organization for testing",
        owner_id=test_user.id,
    )
    db_session.add(org)
    await db_session.flush()

    # Create owner membership
    membership = OrgMembership(
        organization_id=org.id,
        user_id=test_user.id,
        role=OrgMembershipRole.OWNER,
        is_active=True,
    )
    db_session.add(membership)
    await db_session.flush()

    return org


@pytest_asyncio.fixture
async def make_user(
    db_session: AsyncSession, test_org: Organization
) -> Callable[..., Awaitable[User]]:
    """Factory for users with a given role in ``test_org`` (or no membership)."""
    counter = {"n": 0}

    async def _make(role: Optional[OrgMembershipRole] = OrgMembershipRole.MEMBER, name: str = "Member") -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@example.com",
            name=f"{name} {counter['n']}",
            password_hash=get_password_hash("TestPass123"),
        )
        db_session.add(user)
        await db_session.flush()
        if role is not None:
            db_session.add(OrgMembership(
                organization_id=test_org.id,
                user_id=user.id,
                role=role,
                is_active=True,
            ))
            await db_session.flush()
        return user

    return _make


@pytest_asyncio.fixture
async def test_meeting(db_session: AsyncSession, test_org: Organization, test_user: User) -> Meeting:
    """Create a test meeting."""
    meeting = Meeting(
        organization_id=test_org.id,
        title="Board Q1",
        meeting_date=datetime(2025, 3, 1, 18, 0, tzinfo=timezone.utc),
        meeting_type=MeetingType.BOARD,
        status=MeetingStatus.SCHEDULED,
        created_by_id=test_user.id,
    )
    db_session.add(meeting)
    await db_session.flush()
    return meeting


@pytest_asyncio.fixture
async def agenda_items(db_session: AsyncSession, test_meeting: Meeting) -> list[AgendaItem]:
    """Three agenda items in display order."""
    items = [
        AgendaItem(
            meeting_id=test_meeting.id,
            title=title,
            item_type=item_type,
            time_allocated=minutes,
            sort_order=index,
        )
        for index, (title, item_type, minutes) in enumerate([
            ("Call to order", AgendaItemType.CALL_TO_ORDER, 5),
            ("Treasurer's report", AgendaItemType.REPORT, 15),
            ("Budget vote", AgendaItemType.VOTE, 20),
        ])
    ]
    db_session.add_all(items)
    await db_session.flush()
    return items


@pytest_asyncio.fixture
async def test_document(db_session: AsyncSession, test_org: Organization, test_user: User) -> Document:
    """Create a test document."""
    document = Document(
        organization_id=test_org.id,
        name="Annual Report 2024",
        file_type=DocumentFileType.DOCUMENT,
        file_size=2048,
        file_url="https://files.example.org/annual-report-2024.pdf",
        is_public=False,
        uploaded_by_id=test_user.id,
    )
    db_session.add(document)
    await db_session.flush()
    return document
