"""
CamManager - Device Pydantic Schemas
Request bodies and responses for cameras and recorders
"""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional

from cammanager.models.camera import Camera, HddCapacity, Recorder


class CameraSave(BaseModel):
    """
    Schema for saving a camera.

    An `id` matching an existing camera updates it; a missing or unknown
    `id` creates a new one.
    """
    id: Optional[str] = None
    name: str = Field(..., max_length=255)
    ip: str = Field(..., max_length=255)
    recorder_id: str = ""
    location: str
    type: str
    status: str
    install_date: Optional[str] = Field(default=None, description="YYYY-MM-DD, defaults to today")
    note: Optional[str] = None


class CameraResponse(BaseModel):
    """Camera with its recorder resolved for display."""
    id: str
    name: str
    ip: str
    recorder_id: str
    recorder_name: str
    location: str
    type: str
    status: str
    install_date: str
    note: Optional[str] = None
    map_id: Optional[str] = None

    @classmethod
    def build(cls, camera: Camera, recorder_name: str, map_id: Optional[str] = None) -> "CameraResponse":
        return cls(**camera.model_dump(), recorder_name=recorder_name, map_id=map_id)


class RecorderSave(BaseModel):
    """Schema for saving a recorder. A None password keeps the stored one on update."""
    id: Optional[str] = None
    name: str = Field(..., max_length=255)
    ip: str = Field(..., max_length=255)
    port: int = Field(default=80, ge=1, le=65535)
    username: str = "admin"
    password: Optional[str] = None
    location: str
    hdd_capacity: Optional[HddCapacity] = None
    note: Optional[str] = None


class RecorderResponse(BaseModel):
    """Recorder without its password."""
    id: str
    name: str
    ip: str
    port: int
    username: str
    has_password: bool
    location: str
    hdd_capacity: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def build(cls, recorder: Recorder) -> "RecorderResponse":
        data = recorder.model_dump(exclude={"password"})
        return cls(**data, has_password=bool(recorder.password))


class ImportRow(BaseModel):
    """
    One loosely-typed row of a bulk camera import.

    Every field is optional; numbers are accepted and read as text, and
    camelCase keys from spreadsheet exports are accepted too.
    """
    model_config = ConfigDict(extra="ignore")

    ip: Optional[str] = None
    name: Optional[str] = None
    recorder_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("recorder_name", "recorderName")
    )
    location: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    install_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("install_date", "installDate")
    )
    note: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> Optional[str]:
        """Spreadsheet cells arrive as numbers or dates; read everything as text."""
        if v is None:
            return None
        return str(v)


class CameraImportRequest(BaseModel):
    """Bulk import body."""
    rows: List[ImportRow] = Field(default_factory=list)


class CameraImportResponse(BaseModel):
    """Bulk import outcome for the UI notification."""
    added: int
    skipped: int
    outcome: str  # success | warning | error
    message: str
