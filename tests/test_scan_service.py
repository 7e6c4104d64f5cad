import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from campus_attendance.cache import NullCache
from campus_attendance.core.enums import AttendanceStatus
from campus_attendance.core.exceptions import (
    AlreadyRecorded,
    BadRequest,
    CardNotFound,
    PersistenceFailure,
)
from campus_attendance.models import Attendance, Lecture
from campus_attendance.schemas.scan import ScanRequest
from campus_attendance.services.attendance import AttendanceService


def lecture_scan(lecture_id, card_uid="NFC001234567890"):
    return ScanRequest(
        card_uid=card_uid,
        device_code="DEV001",
        gateway_code="ROOM_101",
        lecture_id=lecture_id,
    )


async def _scan(session_factory, request, **kwargs):
    async with session_factory() as session:
        return await AttendanceService(session, NullCache(), **kwargs).record_scan(request)


async def test_concurrent_lecture_scans_record_exactly_once(
    session_factory, seeded, count_records
):
    request = lecture_scan(seeded.lecture_id)

    outcomes = await asyncio.gather(
        _scan(session_factory, request),
        _scan(session_factory, request),
        return_exceptions=True,
    )

    successes = [o for o in outcomes if not isinstance(o, BaseException)]
    duplicates = [o for o in outcomes if isinstance(o, AlreadyRecorded)]
    assert len(successes) == 1
    assert len(duplicates) == 1
    assert (
        await count_records(student_id=seeded.student_id, lecture_id=seeded.lecture_id)
        == 1
    )


async def test_constraint_violation_reads_as_already_recorded(
    session_factory, seeded, count_records, monkeypatch
):
    # Simulate losing the race: the pre-check sees nothing, the insert collides.
    async def nothing_recorded(self, student_id, lecture_id):
        return None

    monkeypatch.setattr(AttendanceService, "_ensure_not_recorded", nothing_recorded)

    await _scan(session_factory, lecture_scan(seeded.lecture_id))
    with pytest.raises(AlreadyRecorded):
        await _scan(session_factory, lecture_scan(seeded.lecture_id))

    assert await count_records(lecture_id=seeded.lecture_id) == 1


async def test_status_uses_injected_clock_and_offset(session_factory, seeded):
    async with session_factory() as session:
        lecture = await session.get(Lecture, seeded.lecture_id)
        start = lecture.start_time.replace(tzinfo=timezone.utc)

    result = await _scan(
        session_factory,
        lecture_scan(seeded.lecture_id),
        clock=lambda: start + timedelta(minutes=6),
        late_after=timedelta(minutes=5),
    )

    assert result.status == AttendanceStatus.late
    assert result.attendance.scanned_at == start + timedelta(minutes=6)


async def test_result_carries_student_and_device(session_factory, seeded):
    result = await _scan(
        session_factory,
        ScanRequest(card_uid="NFC001234567890", device_code="DEV001", gateway_code="MAIN_GATE"),
    )

    assert result.student.id == seeded.student_id
    assert result.device_id == seeded.device_id
    assert result.attendance.lecture_id is None
    assert result.status == AttendanceStatus.present


async def test_bad_request_checked_before_any_lookup(session_factory):
    # No tables are touched: an unseeded database would otherwise fail.
    with pytest.raises(BadRequest):
        await _scan(session_factory, ScanRequest(card_uid=" ", device_code="D", gateway_code="G"))


async def test_storage_timeout_is_persistence_failure(session_factory, seeded, monkeypatch):
    async def stalled(self, card_uid):
        await asyncio.sleep(1)

    monkeypatch.setattr("campus_attendance.services.cards.CardResolver.resolve", stalled)

    with pytest.raises(PersistenceFailure):
        await _scan(session_factory, lecture_scan(seeded.lecture_id), timeout_seconds=0.01)


async def test_database_error_is_persistence_failure(tmp_path):
    # Schema never created: every query fails inside the driver.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    try:
        with pytest.raises(PersistenceFailure):
            await _scan(factory, lecture_scan("any-lecture"))
    finally:
        await engine.dispose()


async def test_card_lookup_runs_before_endpoint_lookup(session_factory, seeded):
    with pytest.raises(CardNotFound):
        await _scan(
            session_factory,
            ScanRequest(card_uid="NFC_REVOKED", device_code="NOPE", gateway_code="NOPE"),
        )


async def test_attendance_rows_keep_scan_time(session_factory, seeded):
    fixed = datetime(2026, 10, 18, 7, 30, tzinfo=timezone.utc)
    result = await _scan(
        session_factory,
        ScanRequest(card_uid="NFC001234567890", device_code="DEV001", gateway_code="MAIN_GATE"),
        clock=lambda: fixed,
    )

    async with session_factory() as session:
        record = await session.get(Attendance, result.attendance.id)

    assert record.scanned_at.replace(tzinfo=timezone.utc) == fixed
