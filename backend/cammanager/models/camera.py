"""
CamManager - Device Records
Cameras and the recorders (NVR/DVR) they stream into
"""
import enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class HddCapacity(str, enum.Enum):
    """Recorder disk sizes offered by the inventory form."""
    TB1 = "1TB"
    TB2 = "2TB"
    TB3 = "3TB"
    TB4 = "4TB"
    TB6 = "6TB"
    TB8 = "8TB"
    TB10 = "10TB"
    TB12 = "12TB"
    TB14 = "14TB"
    TB16 = "16TB"
    TB18 = "18TB"
    TB20 = "20TB"


class Camera(BaseModel):
    """
    Camera record.

    Attributes:
        id: Opaque identifier (cam_<hex> when generated)
        name: Human-readable camera name
        ip: Address or channel (e.g. "192.168.11.237:1"), unique case-insensitively
        recorder_id: Recorder the camera streams into; may be empty or point
            to a recorder that has since been deleted
        location: Location taxonomy value
        type: Camera type taxonomy value (Bullet, Dome, PTZ...)
        status: Status taxonomy value
        install_date: ISO calendar date (YYYY-MM-DD)
        note: Free text
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    ip: str
    recorder_id: str = ""
    location: str
    type: str
    status: str
    install_date: str
    note: Optional[str] = None

    @property
    def ip_key(self) -> str:
        """Normalized IP used for uniqueness checks."""
        return normalize_ip(self.ip)


class Recorder(BaseModel):
    """Recorder (NVR) record. Deleting one leaves cameras with a dangling recorder_id."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    name: str
    ip: str
    port: int = 80
    username: str = "admin"
    password: Optional[str] = None
    location: str
    hdd_capacity: Optional[HddCapacity] = None
    note: Optional[str] = None


def normalize_ip(ip: Optional[str]) -> str:
    return (ip or "").strip().lower()
