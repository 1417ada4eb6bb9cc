"""
CamManager - Activity Log Router
History of committed changes, newest first
"""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query

from cammanager.dependencies import get_inventory, require_admin
from cammanager.models.audit import LogAction, TargetType
from cammanager.models.user import User
from cammanager.schemas.audit import AuditStats, LogEntryList, LogEntryResponse
from cammanager.services.inventory import Inventory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/", response_model=LogEntryList)
async def list_audit_logs(
    user: Optional[str] = None,
    action: Optional[LogAction] = None,
    target_type: Optional[TargetType] = None,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """
    List activity log entries with filtering and pagination.

    - **user**: case-insensitive substring of the acting username
    - **action**: Add, Edit or Delete
    - **target_type**: Camera, Recorder, Location, Type, Status, Map or Account
    """
    entries = inventory.audit.query(
        user=user,
        action=action,
        target_type=target_type,
        start_time=start_time,
        end_time=end_time,
    )

    total = len(entries)
    offset = (page - 1) * page_size
    total_pages = (total + page_size - 1) // page_size

    return LogEntryList(
        items=[LogEntryResponse(**e.model_dump()) for e in entries[offset:offset + page_size]],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages
    )


@router.get("/stats", response_model=AuditStats)
async def get_audit_stats(
    days: int = Query(7, ge=1),
    admin: User = Depends(require_admin),
    inventory: Inventory = Depends(get_inventory)
):
    """Activity summary for the last `days` days."""
    return AuditStats(**inventory.audit.stats(days))


@router.get("/actions")
async def list_action_types(
    admin: User = Depends(require_admin)
):
    """
    Actions and target types, for the filter dropdowns of the log view.
    """
    return {
        "actions": [a.value for a in LogAction],
        "target_types": [t.value for t in TargetType],
    }
