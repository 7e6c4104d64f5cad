from typing import Optional
import datetime
from pydantic import BaseModel, ConfigDict

from campus_attendance.core.enums import AttendanceStatus

from .student import StudentRead


# --- Read Schema (Output) ---
class AttendanceRead(BaseModel):
    id: str
    student_id: str
    card_id: str
    lecture_id: Optional[str] = None
    gateway_id: str
    device_id: str
    scanned_at: datetime.datetime
    status: AttendanceStatus
    note: Optional[str] = None

    # Include full student details in the response
    student: Optional[StudentRead] = None

    model_config = ConfigDict(from_attributes=True)
