"""
CamManager - Activity Log Model
Append-only history of every committed change
"""
import enum
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class LogAction(str, enum.Enum):
    """What kind of change was committed."""
    ADD = "Add"
    EDIT = "Edit"
    DELETE = "Delete"


class TargetType(str, enum.Enum):
    """Kind of record the change touched."""
    CAMERA = "Camera"
    RECORDER = "Recorder"
    LOCATION = "Location"
    TYPE = "Type"
    STATUS = "Status"
    MAP = "Map"
    ACCOUNT = "Account"


class LogEntry(BaseModel):
    """
    Activity log entry.

    Attributes:
        id: Opaque identifier (log_<hex>)
        action: Add | Edit | Delete
        target_type: Type of record affected
        target_name: Name of the record at the time of the change
            (kept even after the record itself is deleted)
        details: Human-readable summary of the change
        timestamp: When the change was committed (UTC)
        user: Username of the acting account
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    action: LogAction
    target_type: TargetType
    target_name: str
    details: str
    timestamp: datetime
    user: str
