"""
CamManager - Application Configuration
"""
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


def get_absolute_storage_path(storage_path: str) -> str:
    """
    Resolve the storage directory and make sure it exists.

    Relative paths are resolved against the backend/ directory so the
    SQLite file lands in the same place no matter where uvicorn is started.
    """
    path = Path(storage_path)
    if not path.is_absolute():
        # Go from config.py -> cammanager/ -> backend/
        path = Path(__file__).parent.parent / path
    path.mkdir(parents=True, exist_ok=True)
    return str(path)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "CamManager"
    app_version: str = "1.0.40"
    debug: bool = False
    cors_origins: List[str] = ["*"]

    # Database (key-value slot for the persisted user collection).
    # Unset means a SQLite file inside storage_path.
    database_url: Optional[str] = None

    # Storage
    storage_path: str = "./storage"

    # Demo inventory loaded on startup
    seed_demo_data: bool = True

    # Assistant (Gemini text generation)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    assistant_timeout: float = 30.0

    # Map images
    max_map_image_bytes: int = 10 * 1024 * 1024  # 10MB

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CAMMANAGER_"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
