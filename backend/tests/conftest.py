"""
TutorMatch Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, created fresh for each test):
    ├── db_session:        AsyncSession on a seeded in-memory SQLite database
    ├── mock_db_session:   AsyncMock session for failure injection
    ├── fake_thumbnail:    Thumbnail bytes seeded on post 1
    ├── png_bytes:         Real 1200x800 PNG produced by Pillow
    ├── storage_files:     Lists files left under the storage root
    ├── session_codec:     Signs/reads session cookies with the test secret
    ├── test_client:       HTTPX AsyncClient bound to the app, anonymous
    └── authed_client:     Same, with a signed session cookie for user 2

Seed Data (see `seed_database`):
    Majors:   CSC (Computer Science), MATH (Mathematics)
    Courses:  CSC 413, CSC 648, MATH 226
    Users:    15 tutors, ids 1-15 (Alice Anderson ... Olga Olsen)
    Posts:    users 1-12 → approved CSC 648 (post 1 has a thumbnail)
              users 13-14 → approved MATH 226
              user 15 → unapproved CSC 648
    Messages: three to user 2 (two unread), one to user 5, none to user 4
"""

import base64
import json
import os
import tempfile
from datetime import datetime, timezone
from io import BytesIO
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any tutormatch imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="tutormatch_test_")
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from itsdangerous import TimestampSigner
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tutormatch.config import settings
from tutormatch.database import Base, get_db_session
from tutormatch.models import Course, Major, Message, TutorPost, User


TUTOR_NAMES = [
    ("Alice", "Anderson"),
    ("Brian", "Baker"),
    ("Carla", "Chen"),
    ("Derek", "Diaz"),
    ("Elena", "Evans"),
    ("Frank", "Foster"),
    ("Grace", "Garcia"),
    ("Henry", "Hughes"),
    ("Irene", "Ito"),
    ("Jamal", "Jones"),
    ("Kira", "Kim"),
    ("Liam", "Lopez"),
    ("Mona", "Malik"),
    ("Nate", "Nolan"),
    ("Olga", "Olsen"),
]

FAKE_THUMBNAIL = b"\x89PNG\r\n\x1a\nthumbnail-bytes"


async def seed_database(session: AsyncSession) -> None:
    session.add_all([
        Major(major_id=1, major_short_name="CSC", major_long_name="Computer Science"),
        Major(major_id=2, major_short_name="MATH", major_long_name="Mathematics"),
    ])
    await session.flush()

    session.add_all([
        Course(course_id=1, number=648, major_id=1, title="Software Engineering"),
        Course(course_id=2, number=413, major_id=1, title="Software Development"),
        Course(course_id=3, number=226, major_id=2, title="Calculus I"),
    ])
    session.add_all([
        User(user_id=i, first_name=first, last_name=last, email=f"{first.lower()}@example.edu")
        for i, (first, last) in enumerate(TUTOR_NAMES, start=1)
    ])
    await session.flush()

    for user_id in range(1, 13):
        session.add(TutorPost(
            post_id=user_id,
            user_id=user_id,
            post_created=True,
            post_details=f"CSC 648 help from tutor {user_id}",
            post_thumbnail=FAKE_THUMBNAIL if user_id == 1 else None,
            admin_approved=True,
            tutoring_course_id=1,
        ))
    for user_id in (13, 14):
        session.add(TutorPost(
            post_id=user_id,
            user_id=user_id,
            post_created=True,
            post_details="Calculus tutoring",
            admin_approved=True,
            tutoring_course_id=3,
        ))
    session.add(TutorPost(
        post_id=15,
        user_id=15,
        post_created=True,
        post_details="Waiting for approval",
        admin_approved=False,
        tutoring_course_id=1,
    ))

    session.add_all([
        Message(
            message_id=1,
            date_sent=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
            message_text="Are you free on Monday?",
            to_user=2,
            from_user=1,
            is_unread=True,
        ),
        Message(
            message_id=2,
            date_sent=datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc),
            message_text="Thanks for the session!",
            to_user=2,
            from_user=3,
            is_unread=False,
        ),
        Message(
            message_id=3,
            date_sent=datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc),
            message_text="Following up about Monday.",
            to_user=2,
            from_user=1,
            is_unread=True,
        ),
        Message(
            message_id=4,
            date_sent=datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc),
            message_text="Not for user 2",
            to_user=5,
            from_user=2,
            is_unread=True,
        ),
    ])
    await session.commit()


def make_session_cookie(data: dict) -> str:
    """Build a cookie value the way Starlette's SessionMiddleware signs it."""
    payload = base64.b64encode(json.dumps(data).encode("utf-8"))
    return TimestampSigner(settings.session_secret).sign(payload).decode("utf-8")


def read_session_cookie(value: str) -> dict:
    payload = TimestampSigner(settings.session_secret).unsign(value)
    return json.loads(base64.b64decode(payload))


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_session():
    """
    Provides a session on a fresh, seeded in-memory SQLite database.

    StaticPool keeps one connection open so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await seed_database(session)
        yield session

    await engine.dispose()


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        result = await category_service.get_search_categories(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Upload Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_thumbnail():
    """Thumbnail bytes seeded on post 1."""
    return FAKE_THUMBNAIL


@pytest.fixture
def png_bytes():
    """A real 1200x800 PNG, so the thumbnail is exactly 600x400."""
    buffer = BytesIO()
    Image.new("RGB", (1200, 800), color=(30, 120, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def storage_files():
    """Lists every file currently under the configured storage root."""
    from tutormatch.services.file_service import file_service

    def _list():
        return [p for p in file_service.storage_root.rglob("*") if p.is_file()]

    return _list


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(db_session):
    """
    Provides an async HTTP test client wired to the seeded database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from tutormatch.main import app

    async def override_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def session_codec():
    """Signs and reads session cookies with the test secret."""
    return SimpleNamespace(dump=make_session_cookie, load=read_session_cookie)


@pytest_asyncio.fixture
async def authed_client(test_client):
    """The same client, logged in as user 2 (Brian Baker)."""
    cookie = make_session_cookie({"user_id": 2})
    test_client.headers["Cookie"] = f"{settings.session_cookie_name}={cookie}"
    return test_client
