"""
CamManager - Taxonomy Router
Locations, camera types and statuses
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from cammanager.dependencies import get_current_user_required, get_inventory, require_admin
from cammanager.errors import InventoryError, to_http_exception
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.models.user import User
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/taxonomy", tags=["taxonomy"])


class TaxonomyValue(BaseModel):
    name: str


class TaxonomyList(BaseModel):
    kind: TaxonomyKind
    values: List[str]


class TaxonomyUsage(BaseModel):
    name: str
    cameras: int = 0
    recorders: int = 0


@router.get("/{kind}", response_model=TaxonomyList)
async def list_values(
    kind: TaxonomyKind,
    current_user: User = Depends(get_current_user_required),
    inventory: Inventory = Depends(get_inventory)
):
    """List every value of a taxonomy, in registration order."""
    return TaxonomyList(kind=kind, values=inventory.taxonomy.values(kind))


@router.get("/{kind}/usage", response_model=List[TaxonomyUsage])
async def list_usage(
    kind: TaxonomyKind,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """How many devices hold each value (a value in use cannot be deleted)."""
    result = []
    for value in inventory.taxonomy.values(kind):
        usage = inventory.taxonomy.usage(kind, value)
        result.append(TaxonomyUsage(
            name=value,
            cameras=usage.get("cameras", 0),
            recorders=usage.get("recorders", 0),
        ))
    return result


@router.post("/{kind}", response_model=TaxonomyList, status_code=status.HTTP_201_CREATED)
async def add_value(
    kind: TaxonomyKind,
    body: TaxonomyValue,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Add a value. Names are unique per taxonomy, ignoring case."""
    try:
        inventory.taxonomy.add(kind, body.name, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return TaxonomyList(kind=kind, values=inventory.taxonomy.values(kind))


@router.put("/{kind}/{name}", response_model=TaxonomyList)
async def rename_value(
    kind: TaxonomyKind,
    name: str,
    body: TaxonomyValue,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """
    Rename a value.

    Every camera and recorder holding the old value is updated, and for
    locations so are the accounts scoped to it.
    """
    try:
        inventory.taxonomy.rename(kind, name, body.name, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return TaxonomyList(kind=kind, values=inventory.taxonomy.values(kind))


@router.delete("/{kind}/{name}", response_model=TaxonomyList)
async def delete_value(
    kind: TaxonomyKind,
    name: str,
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Delete a value nothing references; 409 with the counts otherwise."""
    try:
        inventory.taxonomy.remove(kind, name, actor=admin.username)
    except InventoryError as e:
        raise to_http_exception(e) from e
    return TaxonomyList(kind=kind, values=inventory.taxonomy.values(kind))
