import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.cache import CacheClient
from campus_attendance.config import settings
from campus_attendance.core.enums import AttendanceStatus
from campus_attendance.core.exceptions import (
    AlreadyRecorded,
    BadRequest,
    PersistenceFailure,
    ScanError,
)
from campus_attendance.models.attendance import Attendance
from campus_attendance.models.lecture import Lecture
from campus_attendance.models.student import Student
from campus_attendance.schemas.scan import ScanRequest
from campus_attendance.services.cards import CardResolver
from campus_attendance.services.endpoints import EndpointResolver
from campus_attendance.services.status import compute_status
from campus_attendance.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ScanResult:
    student: Student
    attendance: Attendance
    status: AttendanceStatus
    device_id: str


class AttendanceService:
    """Turns one card tap into at most one attendance record."""

    def __init__(
        self,
        db: AsyncSession,
        cache: CacheClient,
        late_after: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
        timeout_seconds: Optional[float] = None,
    ):
        self.db = db
        self.cache = cache
        self.late_after = (
            late_after
            if late_after is not None
            else timedelta(minutes=settings.LATE_AFTER_MINUTES)
        )
        self.clock = clock
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.STORAGE_TIMEOUT_SECONDS
        )
        self.cards = CardResolver(db)
        self.endpoints = EndpointResolver(db)

    async def record_scan(self, request: ScanRequest) -> ScanResult:
        card_uid, device_code, gateway_code = self._require_fields(request)
        lecture_id = (request.lecture_id or "").strip() or None

        try:
            card = await self._bounded(self.cards.resolve(card_uid))
            gateway_id, device_id = await self._bounded(
                self.endpoints.resolve(gateway_code, device_code)
            )

            lecture = None
            if lecture_id:
                await self._ensure_not_recorded(card.student_id, lecture_id)
                lecture = await self._bounded(self.db.get(Lecture, lecture_id))
                if lecture is None:
                    raise PersistenceFailure(f"lecture {lecture_id} does not exist")

            scanned_at = self.clock()
            status = compute_status(
                scanned_at,
                lecture.start_time if lecture is not None else None,
                self.late_after,
            )
            record = Attendance(
                student_id=card.student_id,
                card_id=card.id,
                lecture_id=lecture_id,
                gateway_id=gateway_id,
                device_id=device_id,
                scanned_at=scanned_at,
                status=status.value,
            )
            await self._insert(record)
        except ScanError:
            raise
        except Exception as exc:
            # any fault past the shape check is reported as a recording failure
            logger.exception("Storage failure while recording scan for %r", card_uid)
            raise PersistenceFailure(str(exc)) from exc

        logger.info(
            "Recorded %s scan %s for student %s at %s",
            status.value,
            record.id,
            card.student.student_id,
            gateway_code,
        )
        return ScanResult(
            student=card.student, attendance=record, status=status, device_id=device_id
        )

    @staticmethod
    def _require_fields(request: ScanRequest) -> tuple[str, str, str]:
        values = (request.card_uid, request.device_code, request.gateway_code)
        cleaned = tuple((value or "").strip() for value in values)
        if not all(cleaned):
            raise BadRequest("card_uid, device_code and gateway_code are required")
        return cleaned  # type: ignore[return-value]

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)

    async def _ensure_not_recorded(self, student_id: str, lecture_id: str) -> None:
        # Quick check in the cache (the fast path)
        key = _cache_key(student_id, lecture_id)
        try:
            if await self.cache.get(key):
                raise AlreadyRecorded(f"{key} cached")
        except AlreadyRecorded:
            raise
        except Exception as exc:
            logger.warning("Duplicate cache lookup failed for %s: %s", key, exc)

        query = select(Attendance.id).where(
            Attendance.student_id == student_id, Attendance.lecture_id == lecture_id
        )
        result = await self._bounded(self.db.execute(query))
        if result.first() is not None:
            await self._remember(student_id, lecture_id)
            raise AlreadyRecorded(f"{key} exists")

    async def _insert(self, record: Attendance) -> None:
        try:
            self.db.add(record)
            await self._bounded(self.db.commit())
        except IntegrityError as exc:
            await self.db.rollback()
            # A concurrent scan won the unique (student, lecture) constraint
            if record.lecture_id is not None:
                await self._remember(record.student_id, record.lecture_id)
                raise AlreadyRecorded("unique constraint") from exc
            raise PersistenceFailure(str(exc)) from exc

        if record.lecture_id is not None:
            await self._remember(record.student_id, record.lecture_id)

    async def _remember(self, student_id: str, lecture_id: str) -> None:
        key = _cache_key(student_id, lecture_id)
        try:
            await self.cache.setex(key, settings.DUPLICATE_CACHE_TTL_SECONDS, "recorded")
        except Exception as exc:
            logger.warning("Could not cache %s: %s", key, exc)


def _cache_key(student_id: str, lecture_id: str) -> str:
    return f"attendance:{student_id}:{lecture_id}"
