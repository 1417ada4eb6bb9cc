"""
CamManager - Recorders Router
NVR/DVR units the cameras record to
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status

from cammanager.dependencies import get_capability, get_inventory, require_admin
from cammanager.errors import InventoryError, to_http_exception
from cammanager.models.user import User
from cammanager.schemas.camera import RecorderResponse, RecorderSave
from cammanager.services.access import Capability, filter_visible
from cammanager.services.devices import search_recorders
from cammanager.services.export import export_filename, recorders_to_csv
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recorders", tags=["Recorders"])


@router.get("/", response_model=List[RecorderResponse])
async def get_recorders(
    q: Optional[str] = None,
    location: Optional[str] = None,
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """List the recorders the current user may see. Passwords are never returned."""
    visible = filter_visible(capability, inventory.devices.recorders())
    return [RecorderResponse.build(r) for r in search_recorders(visible, term=q, location=location)]


@router.get("/export")
async def export_recorders(
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Download the visible recorders as CSV (UTF-8 with BOM)."""
    recorders = filter_visible(capability, inventory.devices.recorders())
    filename = export_filename("recorders")
    return Response(
        content=recorders_to_csv(recorders).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post("/", response_model=RecorderResponse, status_code=status.HTTP_201_CREATED)
async def create_recorder(
    recorder_data: RecorderSave,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Create a new recorder (admin only)."""
    if recorder_data.id and inventory.devices.find_recorder(recorder_data.id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Recorder with id {recorder_data.id} already exists"
        )
    try:
        recorder = inventory.devices.save_recorder(recorder_data, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return RecorderResponse.build(recorder)


@router.put("/{recorder_id}", response_model=RecorderResponse)
async def update_recorder(
    recorder_id: str,
    recorder_data: RecorderSave,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Update a recorder (admin only). Omit the password to keep the stored one."""
    if not inventory.devices.find_recorder(recorder_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Recorder with id {recorder_id} not found"
        )
    try:
        recorder = inventory.devices.save_recorder(
            recorder_data.model_copy(update={"id": recorder_id}), actor=admin.username
        )
    except InventoryError as e:
        raise to_http_exception(e) from e
    return RecorderResponse.build(recorder)


@router.delete("/{recorder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recorder(
    recorder_id: str,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """
    Delete a recorder (admin only).

    Cameras attached to it are kept and show "Unknown" as their recorder.
    """
    inventory.devices.delete_recorder(recorder_id, actor=admin.username)
