from .base import Base
from .student import Student
from .card import Card
from .endpoint import Device, Gateway
from .lecture import Course, Lecture
from .attendance import Attendance

# for wildcard imports
__all__ = ["Base", "Student", "Card", "Gateway", "Device", "Course", "Lecture", "Attendance"]
