from .attendance import AttendanceRead
from .lecture import LectureRead
from .scan import ScanErrorResponse, ScanRequest, ScanResponse
from .student import StudentRead

__all__ = [
    "StudentRead",
    "ScanRequest",
    "ScanResponse",
    "ScanErrorResponse",
    "AttendanceRead",
    "LectureRead",
]
