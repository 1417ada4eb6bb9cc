"""
CamManager - Main Application Entry Point
Camera/recorder inventory with maps, activity log and per-location access
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cammanager.config import Settings, get_absolute_storage_path, get_settings
from cammanager.database import init_db, make_engine, make_session_factory
from cammanager.routers import (
    assistant_router,
    audit_router,
    auth_router,
    cameras_router,
    dashboard_router,
    health_router,
    maps_router,
    recorders_router,
    taxonomy_router,
)
from cammanager.seed import seed_demo_inventory
from cammanager.services.assistant import AssistantService
from cammanager.services.inventory import Inventory, build_inventory
from cammanager.services.storage import SqlKeyValueStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def resolve_database_url(settings: Settings) -> str:
    """Configured URL, or a SQLite file in the storage directory."""
    if settings.database_url:
        return settings.database_url
    storage = get_absolute_storage_path(settings.storage_path)
    return f"sqlite:///{os.path.join(storage, 'cammanager.db')}"


def create_app(
    settings: Optional[Settings] = None,
    inventory: Optional[Inventory] = None,
    assistant: Optional[AssistantService] = None,
) -> FastAPI:
    """
    Build the API.

    A prebuilt `inventory` is used as is (no database, no demo data);
    otherwise one is created at startup on top of the configured database.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}...")

        if app.state.inventory is None:
            engine = make_engine(resolve_database_url(settings), echo=settings.debug)
            init_db(engine)
            app.state.engine = engine
            logger.info("✅ Database initialized")

            app.state.inventory = build_inventory(SqlKeyValueStore(make_session_factory(engine)))
            if settings.seed_demo_data:
                seed_demo_inventory(app.state.inventory)
                logger.info("📷 Demo inventory loaded")

        yield

        # Shutdown
        engine = app.state.engine
        if engine is not None:
            engine.dispose()
        logger.info(f"👋 Shutting down {settings.app_name}...")

    app = FastAPI(
        title=settings.app_name,
        description="Inventory of CCTV cameras and recorders with site maps and an activity log",
        version=settings.app_version,
        lifespan=lifespan
    )
    app.state.inventory = inventory
    app.state.engine = None
    app.state.settings = settings
    app.state.assistant = assistant or AssistantService(settings=settings)

    # CORS middleware for frontend communication
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(taxonomy_router, prefix="/api")
    app.include_router(cameras_router, prefix="/api")
    app.include_router(recorders_router, prefix="/api")
    app.include_router(maps_router, prefix="/api")
    app.include_router(audit_router, prefix="/api")
    app.include_router(dashboard_router, prefix="/api")
    app.include_router(assistant_router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/api/health"
        }

    return app


app = create_app()
