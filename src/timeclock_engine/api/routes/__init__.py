"""API route modules."""

from timeclock_engine.api.routes.admin import router as admin_router
from timeclock_engine.api.routes.health import router as health_router
from timeclock_engine.api.routes.timeclock import router as timeclock_router
from timeclock_engine.api.routes.vacation import router as vacation_router

__all__ = ["admin_router", "health_router", "timeclock_router", "vacation_router"]
