from .admin import router as admin_router
from .auth import router as auth_router
from .bookings import router as bookings_router
from .directory import router as directory_router
from .dj_dashboard import router as dj_router

__all__ = ["admin_router", "auth_router", "bookings_router", "directory_router", "dj_router"]
