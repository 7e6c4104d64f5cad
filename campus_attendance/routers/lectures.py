from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.core.exceptions import LectureNotFound, LectureTransitionError
from campus_attendance.database import get_db
from campus_attendance.schemas.lecture import LectureRead
from campus_attendance.services.lectures import LectureService

router = APIRouter(prefix="/lectures", tags=["lectures"])


@router.post("/{lecture_id}/start", response_model=LectureRead)
async def start_lecture(lecture_id: str, db: AsyncSession = Depends(get_db)):
    """Open a scheduled lecture for scanning."""
    try:
        return await LectureService(db).start(lecture_id)
    except LectureNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lecture not found.")
    except LectureTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/{lecture_id}/end", response_model=LectureRead)
async def end_lecture(lecture_id: str, db: AsyncSession = Depends(get_db)):
    try:
        return await LectureService(db).end(lecture_id)
    except LectureNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lecture not found.")
    except LectureTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
