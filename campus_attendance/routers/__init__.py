from .attendance import router as attendance_router
from .health import router as health_router
from .lectures import router as lectures_router
from .scan import router as scan_router

# for wildcard imports
__all__ = ["attendance_router", "health_router", "lectures_router", "scan_router"]
