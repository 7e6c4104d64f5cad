import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_attendance.database import get_db
from campus_attendance.models.attendance import Attendance
from campus_attendance.schemas.attendance import AttendanceRead

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("/history", response_model=List[AttendanceRead])
async def get_attendance_history(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    lecture_id: Optional[str] = Query(None, description="Attendees of one lecture"),
    student_id: Optional[str] = Query(None, description="One student's records"),
    gate_only: bool = Query(False, description="Only scans without a lecture"),
    on_date: Optional[str] = Query(None, description="Filter by date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Fetch recorded scans, newest first, with optional filtering.
    """
    query = select(Attendance).options(selectinload(Attendance.student))

    if lecture_id:
        query = query.where(Attendance.lecture_id == lecture_id)
    elif gate_only:
        query = query.where(Attendance.lecture_id.is_(None))
    if student_id:
        query = query.where(Attendance.student_id == student_id)

    if on_date:
        try:
            day = datetime.datetime.strptime(on_date, "%Y-%m-%d").replace(
                tzinfo=datetime.timezone.utc
            )
        except ValueError:
            raise HTTPException(
                status_code=400, detail="Invalid date format. Use YYYY-MM-DD"
            )
        query = query.where(
            Attendance.scanned_at >= day,
            Attendance.scanned_at < day + datetime.timedelta(days=1),
        )

    query = query.order_by(Attendance.scanned_at.desc()).offset(skip).limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
