"""
API Module
FastAPI routers for the DoseKeeper application
"""

from api.schedules import router as schedules_router
from api.doses import router as doses_router
from api.medications import router as medications_router
from api.links import router as links_router
from api.notifications import router as notifications_router

from api.deps import (
    get_db,
    get_current_user_id,
    require_patient_access,
    require_medication_access,
    services,
)

from config import settings


__all__ = [
    # Routers
    "schedules_router",
    "doses_router",
    "medications_router",
    "links_router",
    "notifications_router",
    # Dependencies
    "get_db",
    "get_current_user_id",
    "require_patient_access",
    "require_medication_access",
    "services",
]


def include_routers(app):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(schedules_router, prefix=settings.API_PREFIX)
    app.include_router(doses_router, prefix=settings.API_PREFIX)
    app.include_router(medications_router, prefix=settings.API_PREFIX)
    app.include_router(links_router, prefix=settings.API_PREFIX)
    app.include_router(notifications_router, prefix=settings.API_PREFIX)
