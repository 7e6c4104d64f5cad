from datetime import datetime
from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_attendance.core.enums import LectureStatus

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Course(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "courses"

    course_code: Mapped[str] = mapped_column(String(30), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    faculty: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)

    lectures = relationship("Lecture", back_populates="course")


class Lecture(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "lectures"

    course_id: Mapped[str] = mapped_column(ForeignKey("courses.id"), index=True)
    gateway_id: Mapped[str] = mapped_column(ForeignKey("gateways.id"))
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), server_default=LectureStatus.scheduled.value
    )

    course = relationship("Course", back_populates="lectures")

    def __repr__(self):
        return f"<Lecture(id={self.id}, title='{self.title}', status='{self.status}')>"
