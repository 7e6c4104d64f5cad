"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("student_id", sa.String(50), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("faculty", sa.String(100), nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_students_student_id", "students", ["student_id"], unique=True)

    op.create_table(
        "cards",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("card_uid", sa.String(64), nullable=False),
        sa.Column("student_id", sa.String(36), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_cards_card_uid", "cards", ["card_uid"])
    op.create_index("ix_cards_student_id", "cards", ["student_id"])
    op.create_index(
        "uq_cards_active_uid",
        "cards",
        ["card_uid"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active = 1"),
    )

    op.create_table(
        "gateways",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("gateway_type", sa.String(20), server_default="gate", nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_gateways_code", "gateways", ["code"], unique=True)

    op.create_table(
        "devices",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("device_code", sa.String(50), nullable=False),
        sa.Column("device_name", sa.String(100), nullable=False),
        sa.Column("owner", sa.String(100), nullable=True),
        sa.Column("device_type", sa.String(20), server_default="scanner", nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_devices_device_code", "devices", ["device_code"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("course_code", sa.String(30), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("faculty", sa.String(100), nullable=False),
        sa.Column("department", sa.String(100), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_courses_course_code", "courses", ["course_code"], unique=True)

    op.create_table(
        "lectures",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("course_id", sa.String(36), sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("gateway_id", sa.String(36), sa.ForeignKey("gateways.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), server_default="scheduled", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_lectures_course_id", "lectures", ["course_id"])

    op.create_table(
        "attendance",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("student_id", sa.String(36), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("card_id", sa.String(36), sa.ForeignKey("cards.id"), nullable=False),
        sa.Column("lecture_id", sa.String(36), sa.ForeignKey("lectures.id"), nullable=True),
        sa.Column("gateway_id", sa.String(36), sa.ForeignKey("gateways.id"), nullable=False),
        sa.Column("device_id", sa.String(36), sa.ForeignKey("devices.id"), nullable=False),
        sa.Column("scanned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), server_default="present", nullable=False),
        sa.Column("note", sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("student_id", "lecture_id", name="uq_attendance_student_lecture"),
    )
    op.create_index("ix_attendance_student_id", "attendance", ["student_id"])
    op.create_index("ix_attendance_lecture_id", "attendance", ["lecture_id"])
    op.create_index("ix_attendance_scanned_at", "attendance", ["scanned_at"])


def downgrade() -> None:
    op.drop_table("attendance")
    op.drop_table("lectures")
    op.drop_table("courses")
    op.drop_table("devices")
    op.drop_table("gateways")
    op.drop_table("cards")
    op.drop_table("students")
