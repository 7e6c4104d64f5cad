import datetime

from pydantic import BaseModel, ConfigDict

from campus_attendance.core.enums import LectureStatus


class LectureRead(BaseModel):
    id: str
    course_id: str
    gateway_id: str
    title: str
    start_time: datetime.datetime
    end_time: datetime.datetime
    status: LectureStatus

    model_config = ConfigDict(from_attributes=True)
