import asyncio
import sys
import os
import logging
from dotenv import load_dotenv
from sqlalchemy import select
from sqlalchemy.orm import selectinload

script_dir = os.path.dirname(os.path.abspath(__file__))
if os.path.basename(script_dir) == 'scripts':
    project_root = os.path.dirname(script_dir)
else:
    project_root = script_dir

sys.path.append(project_root)
env_path = os.path.join(project_root, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

# Keep the console table readable
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("LOG_FILE", "")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)

from campus_attendance.database import AsyncSessionLocal
from campus_attendance.models.attendance import Attendance


async def show_attendance(limit: int = 50):
    print("\n" + "="*100)
    print(f" {'Scanned at (UTC)':<20} | {'Student':<12} | {'Name':<24} | {'Scope':<38} | {'Status':<8}")
    print("="*100)

    try:
        async with AsyncSessionLocal() as session:
            query = (
                select(Attendance)
                .options(selectinload(Attendance.student))
                .order_by(Attendance.scanned_at.desc())
                .limit(limit)
            )

            result = await session.execute(query)
            records = result.scalars().all()

            if not records:
                print(f" {'No records found.':<95}")
            else:
                for record in records:
                    student = record.student
                    name = f"{student.first_name} {student.last_name}" if student else "Unknown"
                    reg = student.student_id if student else "---"
                    scope = f"lecture {record.lecture_id}" if record.lecture_id else "gate"
                    when = record.scanned_at.strftime("%Y-%m-%d %H:%M:%S")

                    print(f" {when:<20} | {reg:<12} | {name:<24} | {scope:<38} | {record.status:<8}")

    except Exception as e:
        print(f"\n[!] Error fetching data: {e}")
        if "DATABASE_URL" in str(e):
            print("    Hint: Check your .env file location.")

    print("="*100 + "\n")

if __name__ == "__main__":
    try:
        asyncio.run(show_attendance())
    except KeyboardInterrupt:
        pass
