"""
CamManager - API Routers
"""
from cammanager.routers.assistant import router as assistant_router
from cammanager.routers.audit import router as audit_router
from cammanager.routers.auth import router as auth_router
from cammanager.routers.cameras import router as cameras_router
from cammanager.routers.dashboard import router as dashboard_router
from cammanager.routers.health import router as health_router
from cammanager.routers.maps import router as maps_router
from cammanager.routers.recorders import router as recorders_router
from cammanager.routers.taxonomy import router as taxonomy_router

__all__ = [
    "assistant_router",
    "audit_router",
    "auth_router",
    "cameras_router",
    "dashboard_router",
    "health_router",
    "maps_router",
    "recorders_router",
    "taxonomy_router",
]
