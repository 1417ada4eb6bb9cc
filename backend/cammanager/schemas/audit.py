"""
CamManager - Activity Log Pydantic Schemas
"""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Dict, List


class LogEntryResponse(BaseModel):
    """Schema for activity log response."""
    id: str
    action: str
    target_type: str
    target_name: str
    details: str
    timestamp: datetime
    user: str

    model_config = ConfigDict(from_attributes=True)


class LogEntryList(BaseModel):
    """Paginated list of log entries."""
    items: List[LogEntryResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class AuditStats(BaseModel):
    """Activity summary over a period."""
    total_logs: int
    logs_today: int
    unique_users: int
    actions_breakdown: Dict[str, int]  # {"Add": 50, "Delete": 2, ...}
    period_start: datetime
    period_end: datetime
