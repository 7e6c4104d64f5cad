from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from campus_attendance.cache import CacheClient, get_cache
from campus_attendance.database import get_db, get_session_factory
from campus_attendance.schemas.scan import ScanErrorResponse, ScanRequest, ScanResponse
from campus_attendance.schemas.student import StudentRead
from campus_attendance.services.attendance import AttendanceService
from campus_attendance.services.endpoints import mark_device_seen

router = APIRouter(tags=["scan"])

SCAN_PATH = "/scan"

_error_responses = {
    code: {"model": ScanErrorResponse} for code in (400, 404, 409, 500)
}


@router.post(SCAN_PATH, response_model=ScanResponse, responses=_error_responses)
async def scan_card(
    request: ScanRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """
    Validate a card tap and record it.

    Failures are raised as ScanError subclasses and rendered by the
    exception handler registered in main.
    """
    service = AttendanceService(db, cache)
    result = await service.record_scan(request)

    # Liveness is telemetry: it runs after the response is sent.
    background_tasks.add_task(
        mark_device_seen,
        session_factory,
        result.device_id,
        result.attendance.scanned_at,
    )

    return ScanResponse(
        student=StudentRead.model_validate(result.student),
        attendance_id=result.attendance.id,
        status=result.status,
        scanned_at=result.attendance.scanned_at,
    )

