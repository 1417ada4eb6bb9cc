"""
CamManager - Dashboard Router
"""
from typing import Dict, List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from cammanager.dependencies import get_capability, get_inventory
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.services.access import Capability, filter_visible
from cammanager.services.dashboard import summarize
from cammanager.services.inventory import Inventory

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


class DashboardSummary(BaseModel):
    total_cameras: int
    total_recorders: int
    active_cameras: int
    issue_cameras: int
    by_status: List[Dict]
    by_location: List[Dict]


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(
    capability: Capability = Depends(get_capability),
    inventory: Inventory = Depends(get_inventory)
):
    """Overview counts over the devices the current user may see."""
    return DashboardSummary(**summarize(
        filter_visible(capability, inventory.devices.cameras()),
        filter_visible(capability, inventory.devices.recorders()),
        active_status=inventory.taxonomy.first(TaxonomyKind.STATUS),
    ))
