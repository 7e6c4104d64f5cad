from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.core.enums import LectureStatus
from campus_attendance.core.exceptions import LectureNotFound, LectureTransitionError
from campus_attendance.models.lecture import Lecture

# status a lecture must be in -> status it moves to
_TRANSITIONS = {
    "start": (LectureStatus.scheduled, LectureStatus.active),
    "end": (LectureStatus.active, LectureStatus.completed),
}


class LectureService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def start(self, lecture_id: str) -> Lecture:
        return await self._transition(lecture_id, "start")

    async def end(self, lecture_id: str) -> Lecture:
        return await self._transition(lecture_id, "end")

    async def _transition(self, lecture_id: str, action: str) -> Lecture:
        lecture = await self.db.get(Lecture, lecture_id)
        if lecture is None:
            raise LectureNotFound(lecture_id)

        required, target = _TRANSITIONS[action]
        if lecture.status != required.value:
            raise LectureTransitionError(
                f"cannot {action} a lecture that is {lecture.status}"
            )

        lecture.status = target.value
        await self.db.commit()
        await self.db.refresh(lecture)
        return lecture
