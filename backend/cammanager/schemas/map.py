"""
CamManager - Map Pydantic Schemas
Floor-plan maps and camera placement
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from cammanager.models.camera import Camera
from cammanager.models.map import CameraPosition, SiteMap


class MapCreate(BaseModel):
    """Schema for creating a new map (image uploaded separately)."""
    name: str = Field(..., min_length=1, max_length=255, description="Map name")


class MapUpdate(BaseModel):
    """Schema for renaming a map."""
    name: str = Field(..., min_length=1, max_length=255)


class MapResponse(BaseModel):
    """Schema for map response."""
    id: str
    name: str
    image: Optional[str] = None
    has_image: bool = False

    @classmethod
    def build(cls, site_map: SiteMap) -> "MapResponse":
        return cls(**site_map.model_dump(), has_image=bool(site_map.image))


class MapCameraInfo(BaseModel):
    """Camera info for map display."""
    id: str
    name: str
    status: str
    type: str
    x: float
    y: float

    @classmethod
    def build(cls, camera: Camera, position: CameraPosition) -> "MapCameraInfo":
        return cls(
            id=camera.id,
            name=camera.name,
            status=camera.status,
            type=camera.type,
            x=position.x,
            y=position.y,
        )


class MapWithCameras(MapResponse):
    """Map response with positioned cameras."""
    cameras: List[MapCameraInfo] = []


class CameraPositionUpdate(BaseModel):
    """Drop a camera on a map; coordinates are percentages of the map bounds."""
    map_id: str
    x: float = Field(..., ge=0.0, le=100.0, description="X position as percentage (0-100)")
    y: float = Field(..., ge=0.0, le=100.0, description="Y position as percentage (0-100)")


class CameraPositionResponse(BaseModel):
    camera_id: str
    map_id: str
    x: float
    y: float
