"""
CamManager - Cameras Router
Camera inventory scoped to the caller's visible locations
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from cammanager.dependencies import get_capability, get_current_user_required, get_inventory, require_admin
from cammanager.errors import InventoryError, to_http_exception
from cammanager.models.camera import Camera
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.models.user import User
from cammanager.schemas.camera import (
    CameraImportRequest,
    CameraImportResponse,
    CameraResponse,
    CameraSave,
)
from cammanager.services.access import Capability, filter_visible
from cammanager.services.devices import search_cameras
from cammanager.services.export import cameras_to_csv, export_filename
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cameras", tags=["Cameras"])


def _to_response(inventory: Inventory, camera: Camera) -> CameraResponse:
    position = inventory.placements.position(camera.id)
    return CameraResponse.build(
        camera,
        recorder_name=inventory.devices.recorder_name(camera.recorder_id),
        map_id=position.map_id if position else None,
    )


def _stored_location(inventory: Inventory, location: str) -> str:
    """Registered spelling of a location, so the scope check ignores case."""
    return inventory.taxonomy.canonical(TaxonomyKind.LOCATION, location) or location


def _check_scope(capability: Capability, *locations: Optional[str]) -> None:
    """Non-admins may only touch cameras inside their allowed locations."""
    for location in locations:
        if location is not None and not capability.allows(location):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"No access to location '{location}'"
            )


@router.get("/", response_model=List[CameraResponse])
async def get_cameras(
    q: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    type: Optional[str] = None,
    location: Optional[str] = None,
    recorder_id: Optional[str] = None,
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """
    List the cameras the current user may see.

    - **q**: search in name, IP and location
    - **status**, **type**, **location**, **recorder_id**: exact filters
    """
    visible = filter_visible(capability, inventory.devices.cameras())
    cameras = search_cameras(
        visible, term=q, status=status_filter, type=type, location=location, recorder_id=recorder_id
    )
    return [_to_response(inventory, c) for c in cameras]


@router.get("/export")
async def export_cameras(
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Download the visible cameras as CSV (UTF-8 with BOM)."""
    cameras = filter_visible(capability, inventory.devices.cameras())
    content = cameras_to_csv(cameras, inventory.devices.recorder_name)
    filename = export_filename("cameras")
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post("/import", response_model=CameraImportResponse)
async def import_cameras(
    body: CameraImportRequest,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """
    Bulk import cameras.

    - Rows without an IP, or whose IP already exists (in the inventory or
      earlier in the batch), are skipped
    - Unknown locations, types and statuses are registered automatically
    - Recorders are matched by name; unmatched names leave the camera unassigned
    """
    result = inventory.devices.import_cameras(body.rows, actor=admin.username)

    logger.info(f"Bulk import: {result.added} added, {result.skipped} skipped")

    return CameraImportResponse(
        added=result.added,
        skipped=result.skipped,
        outcome=result.outcome,
        message=result.message,
    )


@router.get("/{camera_id}", response_model=CameraResponse)
async def get_camera(
    camera_id: str,
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Get a specific camera by ID."""
    camera = inventory.devices.find_camera(camera_id)
    if camera is None or not capability.allows(camera.location):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Camera with id {camera_id} not found"
        )
    return _to_response(inventory, camera)


@router.post("/", response_model=CameraResponse, status_code=status.HTTP_201_CREATED)
async def create_camera(
    camera_data: CameraSave,
    current_user: User = Depends(get_current_user_required),
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Create a new camera. The IP must not be used by any other camera."""
    if camera_data.id and inventory.devices.find_camera(camera_data.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Camera with id {camera_data.id} already exists"
        )
    _check_scope(capability, _stored_location(inventory, camera_data.location))

    try:
        camera = inventory.devices.save_camera(camera_data, actor=current_user.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return _to_response(inventory, camera)


@router.put("/{camera_id}", response_model=CameraResponse)
async def update_camera(
    camera_id: str,
    camera_data: CameraSave,
    current_user: User = Depends(get_current_user_required),
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Replace a camera's fields. The change is recorded field by field in the activity log."""
    existing = inventory.devices.find_camera(camera_id)
    if existing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Camera with id {camera_id} not found"
        )
    _check_scope(capability, existing.location, _stored_location(inventory, camera_data.location))

    try:
        camera = inventory.devices.save_camera(
            camera_data.model_copy(update={"id": camera_id}), actor=current_user.username
        )
    except InventoryError as e:
        raise to_http_exception(e) from e
    return _to_response(inventory, camera)


@router.delete("/{camera_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_camera(
    camera_id: str,
    current_user: User = Depends(get_current_user_required),
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Delete a camera and remove it from any map. Unknown ids are ignored."""
    camera = inventory.devices.find_camera(camera_id)
    if camera is not None:
        _check_scope(capability, camera.location)
    inventory.devices.delete_camera(camera_id, actor=current_user.username)
