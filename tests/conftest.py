import os

# Settings are read at import time; keep tests off the file log and migrations.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")
os.environ.setdefault("CACHE_BACKEND", "none")

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from campus_attendance.cache import get_cache
from campus_attendance.database import get_db, get_session_factory
from campus_attendance.main import app
from campus_attendance.models import (
    Attendance,
    Base,
    Card,
    Course,
    Device,
    Gateway,
    Lecture,
    Student,
)


class FakeCache:
    """In-test stand-in for the Redis fast path."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.broken = False

    async def get(self, key: str) -> str | None:
        if self.broken:
            raise ConnectionError("cache down")
        return self.values.get(key)

    async def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        if self.broken:
            raise ConnectionError("cache down")
        self.values[key] = value

    async def close(self) -> None:
        pass


@pytest.fixture()
async def engine(tmp_path):
    # A file database so that concurrent sessions see each other's commits.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'scan_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture()
def cache():
    return FakeCache()


@pytest.fixture()
async def seeded(session_factory):
    now = datetime.now(timezone.utc)
    async with session_factory() as session:
        student = Student(
            student_id="S1",
            first_name="Ada",
            last_name="Lovelace",
            faculty="Engineering",
            department="Computer Science",
        )
        other = Student(
            student_id="S2",
            first_name="Alan",
            last_name="Turing",
            faculty="Engineering",
            department="Mathematics",
        )
        card = Card(card_uid="NFC001234567890", student=student)
        other_card = Card(card_uid="NFC000000000002", student=other)
        revoked = Card(card_uid="NFC_REVOKED", student=other, is_active=False)
        gate = Gateway(
            code="MAIN_GATE", display_name="Main Gate", location="North entrance"
        )
        room = Gateway(
            code="ROOM_101",
            display_name="Room 101",
            location="Engineering block",
            gateway_type="classroom",
        )
        device = Device(device_code="DEV001", device_name="Gate scanner")
        course = Course(
            course_code="CS101",
            title="Intro to Programming",
            faculty="Engineering",
            department="Computer Science",
        )
        session.add_all(
            [student, other, card, other_card, revoked, gate, room, device, course]
        )
        await session.flush()

        # Started a minute ago: scans now are on time.
        current = Lecture(
            course_id=course.id,
            gateway_id=room.id,
            title="CS101 - current",
            start_time=now - timedelta(minutes=1),
            end_time=now + timedelta(hours=1),
        )
        # Started two hours ago: scans now are late.
        earlier = Lecture(
            course_id=course.id,
            gateway_id=room.id,
            title="CS101 - earlier",
            start_time=now - timedelta(hours=2),
            end_time=now + timedelta(minutes=30),
        )
        session.add_all([current, earlier])
        await session.commit()

        return SimpleNamespace(
            student_id=student.id,
            other_student_id=other.id,
            card_id=card.id,
            gateway_id=gate.id,
            room_id=room.id,
            device_id=device.id,
            lecture_id=current.id,
            late_lecture_id=earlier.id,
        )


@pytest.fixture()
async def client(session_factory, cache):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_cache] = lambda: cache

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def count_records(session_factory):
    """Count attendance rows matching column == value filters."""

    async def count(**filters) -> int:
        async with session_factory() as session:
            query = select(func.count(Attendance.id))
            for column, value in filters.items():
                query = query.where(getattr(Attendance, column) == value)
            result = await session.execute(query)
            return result.scalar_one()

    return count
