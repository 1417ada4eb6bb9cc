"""
CamManager - Site Map Records
Floor plans and camera positions on them
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict


class SiteMap(BaseModel):
    """
    Floor plan / site map.

    The image is an opaque reference (a data URI) and stays None until uploaded.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image: Optional[str] = None


class CameraPosition(BaseModel):
    """Where a camera sits on a map, as percentages of the map bounds (0-100)."""
    model_config = ConfigDict(frozen=True)

    camera_id: str
    map_id: str
    x: float
    y: float
