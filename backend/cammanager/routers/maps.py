"""
CamManager - Maps Router
Floor-plan maps and drag-and-drop camera positioning
"""
import base64
import logging
import mimetypes
import os
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from cammanager.config import Settings
from cammanager.dependencies import (
    get_app_settings,
    get_capability,
    get_current_user_required,
    get_inventory,
    require_admin,
)
from cammanager.errors import InventoryError, to_http_exception
from cammanager.models.camera import Camera
from cammanager.models.user import User
from cammanager.schemas.camera import CameraResponse
from cammanager.schemas.map import (
    CameraPositionResponse,
    CameraPositionUpdate,
    MapCameraInfo,
    MapCreate,
    MapResponse,
    MapUpdate,
    MapWithCameras,
)
from cammanager.services.access import Capability, filter_visible
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maps", tags=["maps"])

# Allowed image extensions
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"}


def _visible_camera(inventory: Inventory, capability: Capability, camera_id: str) -> Camera:
    camera = inventory.devices.find_camera(camera_id)
    if camera is None or not capability.allows(camera.location):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Camera with id {camera_id} not found"
        )
    return camera


def _existing_map_or_404(inventory: Inventory, map_id: str):
    site_map = inventory.placements.find_map(map_id)
    if site_map is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Map with id {map_id} not found"
        )
    return site_map


@router.get("/", response_model=List[MapResponse])
async def list_maps(
    current_user: User = Depends(get_current_user_required),
    inventory: Inventory = Depends(get_inventory)
):
    """List all maps, sorted by name."""
    return [MapResponse.build(m) for m in inventory.placements.maps()]


@router.post("/", response_model=MapResponse, status_code=status.HTTP_201_CREATED)
async def create_map(
    data: MapCreate,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Create an empty map; the floor-plan image is uploaded separately."""
    try:
        site_map = inventory.placements.add_map(data.name, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return MapResponse.build(site_map)


# ============================================================
# Camera Position Endpoints
# ============================================================

@router.get("/cameras/unplaced", response_model=List[CameraResponse])
async def get_unplaced_cameras(
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Visible cameras that are not positioned on any map."""
    cameras = filter_visible(capability, inventory.devices.cameras())
    unplaced = set(inventory.placements.unplaced(c.id for c in cameras))
    return [
        CameraResponse.build(c, recorder_name=inventory.devices.recorder_name(c.recorder_id))
        for c in sorted(cameras, key=lambda c: c.name.lower())
        if c.id in unplaced
    ]


@router.put("/cameras/{camera_id}/position", response_model=CameraPositionResponse)
async def update_camera_position(
    camera_id: str,
    position: CameraPositionUpdate,
    current_user: User = Depends(get_current_user_required),
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """
    Place or move a camera on a map.

    - **map_id**: ID of the map to position the camera on
    - **x**: X position as percentage (0-100)
    - **y**: Y position as percentage (0-100)
    """
    camera = _visible_camera(inventory, capability, camera_id)
    site_map = _existing_map_or_404(inventory, position.map_id)

    placed = inventory.placements.set_position(camera.id, position.x, position.y, site_map.id)

    logger.info(f"Camera '{camera.name}' positioned on map '{site_map.name}' at ({position.x}, {position.y})")

    return CameraPositionResponse(**placed.model_dump())


@router.delete("/cameras/{camera_id}/position", status_code=status.HTTP_204_NO_CONTENT)
async def remove_camera_from_map(
    camera_id: str,
    current_user: User = Depends(get_current_user_required),
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Remove a camera from its map (clear position)."""
    camera = _visible_camera(inventory, capability, camera_id)
    if inventory.placements.clear_position(camera.id):
        logger.info(f"Camera '{camera.name}' removed from map")


# ============================================================
# Single map
# ============================================================

@router.get("/{map_id}", response_model=MapWithCameras)
async def get_map(
    map_id: str,
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Get a map with the visible cameras positioned on it."""
    site_map = _existing_map_or_404(inventory, map_id)

    cameras_info = []
    for pos in inventory.placements.positions_on(map_id):
        camera = inventory.devices.find_camera(pos.camera_id)
        if camera is not None and capability.allows(camera.location):
            cameras_info.append(MapCameraInfo.build(camera, pos))

    return MapWithCameras(**MapResponse.build(site_map).model_dump(), cameras=cameras_info)


@router.patch("/{map_id}", response_model=MapResponse)
async def update_map(
    map_id: str,
    data: MapUpdate,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Rename a map."""
    _existing_map_or_404(inventory, map_id)
    try:
        site_map = inventory.placements.rename_map(map_id, data.name, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return MapResponse.build(site_map)


@router.delete("/{map_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_map(
    map_id: str,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Delete a map; cameras on it become unplaced."""
    _existing_map_or_404(inventory, map_id)
    inventory.placements.delete_map(map_id, actor=admin.username)


@router.post("/{map_id}/image", response_model=MapResponse)
async def upload_map_image(
    map_id: str,
    image: UploadFile = File(...),
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory),
    settings: Settings = Depends(get_app_settings)
):
    """
    Upload or replace the floor-plan image (JPG, PNG, GIF, WebP, SVG).

    The image is stored inline as a data URI.
    """
    _existing_map_or_404(inventory, map_id)
    max_bytes = settings.max_map_image_bytes

    # Validate file extension
    file_ext = os.path.splitext(image.filename or "")[1].lower()
    if file_ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    # Validate file size
    content = await image.read()
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size: {max_bytes // (1024*1024)}MB"
        )

    media_type = mimetypes.types_map.get(file_ext) or image.content_type or "application/octet-stream"
    data_uri = f"data:{media_type};base64,{base64.b64encode(content).decode('ascii')}"

    site_map = inventory.placements.update_map_image(map_id, data_uri, actor=admin.username)
    logger.info(f"Map image uploaded for '{site_map.name}' ({len(content)} bytes)")
    return MapResponse.build(site_map)


@router.delete("/{map_id}/image", response_model=MapResponse)
async def delete_map_image(
    map_id: str,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Remove the floor-plan image, keeping the map and its camera positions."""
    _existing_map_or_404(inventory, map_id)
    site_map = inventory.placements.update_map_image(map_id, None, actor=admin.username)
    return MapResponse.build(site_map)
