"""
CamManager - Health Check Router
"""
import logging
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from cammanager.config import Settings
from cammanager.dependencies import get_app_settings, get_assistant, get_inventory
from cammanager.services.assistant import AssistantService
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    version: str
    cameras: int
    recorders: int


class DetailedHealthResponse(BaseModel):
    """Detailed health check response."""
    status: str
    services: dict


@router.get("/health", response_model=HealthResponse)
async def health_check(
    inventory: Inventory = Depends(get_inventory),
    settings: Settings = Depends(get_app_settings)
):
    """Liveness check with the size of the inventory."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        cameras=len(inventory.devices.cameras()),
        recorders=len(inventory.devices.recorders()),
    )


@router.get("/health/detailed", response_model=DetailedHealthResponse)
async def detailed_health_check(
    request: Request,
    assistant: AssistantService = Depends(get_assistant)
):
    """
    Detailed health check with all service statuses.

    The database is only checked when the app runs on one; an app built
    around an in-memory store reports it as "not configured".
    """
    services = {
        "api": "healthy",
        "database": "not configured",
        "assistant": "configured" if assistant.api_key else "no api key",
    }

    engine = getattr(request.app.state, "engine", None)
    if engine is not None:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            services["database"] = "healthy"
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            services["database"] = "unreachable"

    overall_status = "degraded" if services["database"] == "unreachable" else "healthy"

    return DetailedHealthResponse(
        status=overall_status,
        services=services
    )
