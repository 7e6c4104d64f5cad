from datetime import datetime, timedelta, timezone
from typing import Optional

from campus_attendance.core.enums import AttendanceStatus


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_status(
    scanned_at: datetime,
    lecture_start: Optional[datetime],
    late_after: timedelta,
) -> AttendanceStatus:
    """
    Decide the status of a scan.

    Gate scans (no lecture) are always present. A lecture scan is late only
    when it happens strictly after lecture_start + late_after.
    """
    if lecture_start is None:
        return AttendanceStatus.present
    if as_utc(scanned_at) > as_utc(lecture_start) + late_after:
        return AttendanceStatus.late
    return AttendanceStatus.present
