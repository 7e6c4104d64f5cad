from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_attendance.core.enums import AttendanceStatus

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Attendance(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "attendance"

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.id"), nullable=False, index=True
    )
    card_id: Mapped[str] = mapped_column(ForeignKey("cards.id"), nullable=False)

    # NULL for gate scans
    lecture_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("lectures.id"), nullable=True, index=True
    )
    gateway_id: Mapped[str] = mapped_column(ForeignKey("gateways.id"), nullable=False)
    device_id: Mapped[str] = mapped_column(ForeignKey("devices.id"), nullable=False)

    scanned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), server_default=AttendanceStatus.present.value
    )
    note: Mapped[Optional[str]] = mapped_column(String(500))

    # Relationships
    student = relationship("Student")

    # one record per student per lecture; NULL lecture_id never collides,
    # so repeated gate taps are all kept.
    __table_args__ = (
        UniqueConstraint("student_id", "lecture_id", name="uq_attendance_student_lecture"),
    )

    def __repr__(self):
        return f"<Attendance(student_id={self.student_id}, lecture_id={self.lecture_id})>"
