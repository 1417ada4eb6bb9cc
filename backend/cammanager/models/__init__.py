"""
CamManager - Models
In-memory records plus the SQL key-value slot for persisted users
"""
from cammanager.models.camera import Camera, Recorder, HddCapacity, normalize_ip
from cammanager.models.map import SiteMap, CameraPosition
from cammanager.models.audit import LogEntry, LogAction, TargetType
from cammanager.models.user import User, UserRole
from cammanager.models.taxonomy import (
    TaxonomyKind,
    DEFAULT_STATUSES,
    DEFAULT_CAMERA_TYPES,
    DEFAULT_LOCATION,
)
from cammanager.models.settings import KeyValueEntry, USERS_KEY

__all__ = [
    "Camera",
    "Recorder",
    "HddCapacity",
    "normalize_ip",
    "SiteMap",
    "CameraPosition",
    "LogEntry",
    "LogAction",
    "TargetType",
    "User",
    "UserRole",
    "TaxonomyKind",
    "DEFAULT_STATUSES",
    "DEFAULT_CAMERA_TYPES",
    "DEFAULT_LOCATION",
    "KeyValueEntry",
    "USERS_KEY",
]
