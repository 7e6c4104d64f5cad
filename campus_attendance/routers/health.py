from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text

from campus_attendance.database import get_db
from campus_attendance.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """
    Simple probe to verify the API server is up.
    """
    return {"status": "ok", "service": "Campus Attendance Scan API"}


@router.get("/db", status_code=status.HTTP_200_OK)
async def db_health_check(db: AsyncSession = Depends(get_db)):
    """
    Deep probe to verify the Database connection is active.
    """
    try:
        result = await db.execute(text("SELECT 1"))
        if result.scalar_one() == 1:
            return {"status": "up", "database": "connected"}
        else:
            raise HTTPException(
                status_code=500, detail="Database returned unexpected result"
            )
    except HTTPException:
        raise
    except Exception as e:
        logger.warning("Database probe failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        )
