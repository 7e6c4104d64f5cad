import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from campus_attendance.database import AsyncSessionLocal
from campus_attendance.models import Card, Course, Device, Gateway, Lecture, Student


async def seed():
    async with AsyncSessionLocal() as session:
        # Check if DB is already seeded
        result = await session.execute(select(Student).limit(1))
        if result.scalars().first():
            print("Database already contains data. Skipping seed.")
            return

        print("Seeding database with demo records...")

        student = Student(
            student_id="S2024001",
            first_name="Ada",
            last_name="Lovelace",
            faculty="Engineering",
            department="Computer Science",
            email="ada@example.edu",
        )
        card = Card(card_uid="NFC001234567890", student=student)
        main_gate = Gateway(
            code="MAIN_GATE",
            display_name="Main Gate",
            location="North entrance",
            gateway_type="gate",
        )
        room = Gateway(
            code="ROOM_101",
            display_name="Room 101",
            location="Engineering block, ground floor",
            gateway_type="classroom",
            capacity=60,
        )
        device = Device(device_code="DEV001", device_name="Main gate scanner", device_type="scanner")
        course = Course(
            course_code="CS101",
            title="Introduction to Programming",
            faculty="Engineering",
            department="Computer Science",
        )
        session.add_all([student, card, main_gate, room, device, course])
        await session.flush()

        start = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
        lecture = Lecture(
            course_id=course.id,
            gateway_id=room.id,
            title="CS101 - Week 1",
            start_time=start,
            end_time=start + timedelta(hours=2),
        )
        session.add(lecture)
        await session.commit()

        print(f"Added student {student.student_id} with card {card.card_uid}")
        print(f"Gateways: {main_gate.code}, {room.code}; device: {device.device_code}")
        print(f"Lecture id: {lecture.id}")


if __name__ == "__main__":
    asyncio.run(seed())
