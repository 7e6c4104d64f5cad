from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


# --- Read Schema (Output) ---
class StudentRead(BaseModel):
    id: str
    student_id: str
    first_name: str
    last_name: str
    faculty: str
    department: str
    email: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
