from enum import Enum


class AttendanceStatus(str, Enum):
    present = "present"
    late = "late"
    excused = "excused"


class GatewayType(str, Enum):
    gate = "gate"
    classroom = "classroom"


class DeviceType(str, Enum):
    mobile = "mobile"
    scanner = "scanner"
    tablet = "tablet"


class LectureStatus(str, Enum):
    scheduled = "scheduled"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"
