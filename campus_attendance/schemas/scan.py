import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from campus_attendance.core.enums import AttendanceStatus

from .student import StudentRead


# --- Request Schema (Input) ---
# Everything optional here: presence is checked by the validator so that a
# missing field is a BadRequest rather than a framework 422.
class ScanRequest(BaseModel):
    card_uid: Optional[str] = Field(None, examples=["NFC001234567890"])
    device_code: Optional[str] = Field(None, examples=["DEV001"])
    gateway_code: Optional[str] = Field(None, examples=["MAIN_GATE"])
    lecture_id: Optional[str] = None


# --- Response Schemas (Output) ---
class ScanResponse(BaseModel):
    ok: Literal[True] = True
    student: StudentRead
    attendance_id: str
    status: AttendanceStatus
    scanned_at: datetime.datetime


class ScanErrorResponse(BaseModel):
    ok: Literal[False] = False
    error: str
