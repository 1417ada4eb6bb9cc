"""
CamManager - Device Store
Cameras and recorders with IP uniqueness, taxonomy-checked fields and
field-by-field change history
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set

from cammanager.errors import DuplicateIPError, ValidationError
from cammanager.models.audit import LogAction, TargetType
from cammanager.models.camera import Camera, Recorder
from cammanager.models.taxonomy import (
    DEFAULT_CAMERA_TYPES,
    DEFAULT_LOCATION,
    DEFAULT_STATUSES,
    TaxonomyKind,
)
from cammanager.schemas.camera import CameraSave, ImportRow, RecorderSave
from cammanager.services.audit import AuditLog
from cammanager.services.placement import MapPlacementStore
from cammanager.services.taxonomy import TaxonomyRegistry

logger = logging.getLogger(__name__)

UNKNOWN_RECORDER = "Unknown"
UNNAMED_CAMERA = "Unnamed Camera"
NO_CHANGES = "updated, no data changed"

# Fields compared when a save replaces an existing record, with their log labels
CAMERA_DIFF_FIELDS = [
    ("name", "name"),
    ("ip", "IP"),
    ("location", "location"),
    ("status", "status"),
    ("type", "type"),
    ("recorder_id", "recorder"),
    ("install_date", "install date"),
    ("note", "note"),
]

RECORDER_DIFF_FIELDS = [
    ("name", "name"),
    ("ip", "IP"),
    ("port", "port"),
    ("username", "username"),
    ("password", "password"),
    ("location", "location"),
    ("hdd_capacity", "HDD"),
    ("note", "note"),
]


@dataclass
class ImportResult:
    """Counts reported back to the UI after a bulk import."""
    added: int
    skipped: int

    @property
    def outcome(self) -> str:
        if self.added == 0:
            return "error"
        if self.skipped:
            return "warning"
        return "success"

    @property
    def message(self) -> str:
        return f"Imported {self.added} cameras, skipped {self.skipped} duplicate-IP records"


class DeviceStore:
    """
    Owns camera and recorder records.

    Saves are validated completely before anything is written, so a
    rejected save leaves no record change and no log entry behind.
    """

    def __init__(self, taxonomy: TaxonomyRegistry, placements: MapPlacementStore, audit: AuditLog) -> None:
        self._taxonomy = taxonomy
        self._placements = placements
        self._audit = audit
        self._cameras: Dict[str, Camera] = {}
        self._recorders: Dict[str, Recorder] = {}
        taxonomy.register_dependent(self)

    # ============================================================
    # Read side
    # ============================================================

    def cameras(self) -> List[Camera]:
        return list(self._cameras.values())

    def recorders(self) -> List[Recorder]:
        return list(self._recorders.values())

    def find_camera(self, camera_id: str) -> Optional[Camera]:
        return self._cameras.get(camera_id)

    def find_recorder(self, recorder_id: str) -> Optional[Recorder]:
        return self._recorders.get(recorder_id)

    def recorder_name(self, recorder_id: Optional[str]) -> str:
        """Display name of a camera's recorder; dangling or empty ids read as "Unknown"."""
        recorder = self._recorders.get(recorder_id or "")
        return recorder.name if recorder else UNKNOWN_RECORDER

    def find_recorder_by_name(self, name: Optional[str]) -> Optional[Recorder]:
        key = (name or "").strip().lower()
        if not key:
            return None
        for recorder in self._recorders.values():
            if recorder.name.strip().lower() == key:
                return recorder
        return None

    # ============================================================
    # Cameras
    # ============================================================

    def save_camera(self, data: CameraSave, actor: Optional[str]) -> Camera:
        """
        Insert or update a camera.

        Raises:
            ValidationError: blank name/IP, unknown taxonomy value or recorder
            DuplicateIPError: IP already used by another camera
        """
        existing = self._cameras.get(data.id) if data.id else None
        camera = self._build_camera(data, existing)

        ip_key = camera.ip_key
        for other in self._cameras.values():
            if other.id != camera.id and other.ip_key == ip_key:
                raise DuplicateIPError(f"IP '{camera.ip}' is already used by camera '{other.name}'")

        self._cameras[camera.id] = camera

        if existing is None:
            self._audit.append(
                LogAction.ADD,
                TargetType.CAMERA,
                camera.name,
                f"Added {camera.type} camera at {camera.location} ({camera.ip})",
                actor,
            )
        else:
            self._audit.append(
                LogAction.EDIT,
                TargetType.CAMERA,
                camera.name,
                self._diff(existing, camera, CAMERA_DIFF_FIELDS),
                actor,
            )
        return camera

    def delete_camera(self, camera_id: str, actor: Optional[str]) -> bool:
        """Delete a camera and its map placement. Unknown ids are ignored."""
        camera = self._cameras.pop(camera_id, None)
        if camera is None:
            return False

        self._placements.clear_position(camera_id)
        self._audit.append(
            LogAction.DELETE,
            TargetType.CAMERA,
            camera.name,
            f"Deleted camera {camera.ip} at {camera.location}",
            actor,
        )
        return True

    def import_cameras(self, rows: Sequence[ImportRow], actor: Optional[str]) -> ImportResult:
        """
        Bulk-insert cameras.

        Rows with an empty IP, or an IP already used by an existing camera
        or an earlier row of the same batch, are skipped. New location, type
        and status values are registered on the fly. Install dates that are
        not YYYY-MM-DD fall back to today. One aggregate log entry covers the
        whole batch.
        """
        seen: Set[str] = {c.ip_key for c in self._cameras.values()}
        today = date.today().isoformat()
        default_type = self._taxonomy.first(TaxonomyKind.TYPE) or DEFAULT_CAMERA_TYPES[0]
        default_status = self._taxonomy.first(TaxonomyKind.STATUS) or DEFAULT_STATUSES[0]
        staged: List[Camera] = []
        skipped = 0

        for row in rows:
            ip = (row.ip or "").strip()
            if not ip or ip.lower() in seen:
                skipped += 1
                continue
            seen.add(ip.lower())

            recorder = self.find_recorder_by_name(row.recorder_name)
            staged.append(Camera(
                id=_new_id("cam"),
                name=(row.name or "").strip() or UNNAMED_CAMERA,
                ip=ip,
                recorder_id=recorder.id if recorder else "",
                location=(row.location or "").strip() or DEFAULT_LOCATION,
                type=(row.type or "").strip() or default_type,
                status=(row.status or "").strip() or default_status,
                install_date=_iso_date(row.install_date) or today,
                note=(row.note or "").strip() or None,
            ))

        result = ImportResult(added=len(staged), skipped=skipped)
        if not staged:
            logger.info(f"Import committed nothing ({skipped} rows skipped)")
            return result

        for camera in staged:
            camera = camera.model_copy(update={
                "location": self._taxonomy.ensure(TaxonomyKind.LOCATION, camera.location),
                "type": self._taxonomy.ensure(TaxonomyKind.TYPE, camera.type),
                "status": self._taxonomy.ensure(TaxonomyKind.STATUS, camera.status),
            })
            self._cameras[camera.id] = camera

        self._audit.append(
            LogAction.ADD,
            TargetType.CAMERA,
            "Bulk import",
            result.message,
            actor,
        )
        return result

    # ============================================================
    # Recorders
    # ============================================================

    def save_recorder(self, data: RecorderSave, actor: Optional[str]) -> Recorder:
        """Insert or update a recorder. No IP uniqueness gate applies to recorders."""
        existing = self._recorders.get(data.id) if data.id else None

        name = data.name.strip()
        ip = data.ip.strip()
        if not name:
            raise ValidationError("Recorder name is required")
        if not ip:
            raise ValidationError("Recorder IP is required")
        location = self._require(TaxonomyKind.LOCATION, data.location)

        password = data.password
        if password is None and existing is not None:
            password = existing.password

        recorder = Recorder(
            id=existing.id if existing else (data.id or _new_id("rec")),
            name=name,
            ip=ip,
            port=data.port,
            username=data.username.strip(),
            password=password or None,
            location=location,
            hdd_capacity=data.hdd_capacity,
            note=_clean_note(data.note),
        )
        self._recorders[recorder.id] = recorder

        if existing is None:
            self._audit.append(
                LogAction.ADD,
                TargetType.RECORDER,
                recorder.name,
                f"Added recorder {recorder.ip}:{recorder.port} at {recorder.location}",
                actor,
            )
        else:
            self._audit.append(
                LogAction.EDIT,
                TargetType.RECORDER,
                recorder.name,
                self._diff(existing, recorder, RECORDER_DIFF_FIELDS),
                actor,
            )
        return recorder

    def delete_recorder(self, recorder_id: str, actor: Optional[str]) -> bool:
        """
        Delete a recorder. Cameras pointing at it keep their recorder_id
        and display as "Unknown" from then on.
        """
        recorder = self._recorders.pop(recorder_id, None)
        if recorder is None:
            return False

        orphans = sum(1 for c in self._cameras.values() if c.recorder_id == recorder_id)
        details = f"Deleted recorder {recorder.ip}:{recorder.port}"
        if orphans:
            details += f" ({orphans} cameras left without a recorder)"
        self._audit.append(LogAction.DELETE, TargetType.RECORDER, recorder.name, details, actor)
        return True

    # ============================================================
    # Taxonomy cascades
    # ============================================================

    def count_references(self, kind: TaxonomyKind, value: str) -> Dict[str, int]:
        field = kind.value
        counts = {"cameras": sum(1 for c in self._cameras.values() if getattr(c, field) == value)}
        if kind == TaxonomyKind.LOCATION:
            counts["recorders"] = sum(1 for r in self._recorders.values() if r.location == value)
        return counts

    def rename_references(self, kind: TaxonomyKind, old: str, new: str) -> Dict[str, int]:
        field = kind.value
        cameras = 0
        for camera_id, camera in self._cameras.items():
            if getattr(camera, field) == old:
                self._cameras[camera_id] = camera.model_copy(update={field: new})
                cameras += 1

        counts = {"cameras": cameras}
        if kind == TaxonomyKind.LOCATION:
            recorders = 0
            for recorder_id, recorder in self._recorders.items():
                if recorder.location == old:
                    self._recorders[recorder_id] = recorder.model_copy(update={"location": new})
                    recorders += 1
            counts["recorders"] = recorders
        return counts

    # ============================================================
    # Helpers
    # ============================================================

    def _build_camera(self, data: CameraSave, existing: Optional[Camera]) -> Camera:
        name = data.name.strip()
        ip = data.ip.strip()
        if not name:
            raise ValidationError("Camera name is required")
        if not ip:
            raise ValidationError("Camera IP is required")

        recorder_id = (data.recorder_id or "").strip()
        unchanged = existing is not None and existing.recorder_id == recorder_id
        if recorder_id and recorder_id not in self._recorders and not unchanged:
            raise ValidationError(f"Recorder '{recorder_id}' does not exist")

        install_date = (data.install_date or "").strip() or date.today().isoformat()
        try:
            date.fromisoformat(install_date)
        except ValueError:
            raise ValidationError(f"Invalid install date: {install_date}. Use YYYY-MM-DD format.")

        return Camera(
            id=existing.id if existing else (data.id or _new_id("cam")),
            name=name,
            ip=ip,
            recorder_id=recorder_id,
            location=self._require(TaxonomyKind.LOCATION, data.location),
            type=self._require(TaxonomyKind.TYPE, data.type),
            status=self._require(TaxonomyKind.STATUS, data.status),
            install_date=install_date,
            note=_clean_note(data.note),
        )

    def _require(self, kind: TaxonomyKind, value: Optional[str]) -> str:
        canonical = self._taxonomy.canonical(kind, value)
        if canonical is None:
            raise ValidationError(f"Unknown {kind.label}: '{value}'")
        return canonical

    def _diff(self, before, after, fields) -> str:
        changes = []
        for field, label in fields:
            old, new = getattr(before, field), getattr(after, field)
            if old == new:
                continue
            if field == "password":
                changes.append("password changed")
            elif field == "recorder_id":
                changes.append(f"{label}: '{self.recorder_name(old)}' -> '{self.recorder_name(new)}'")
            else:
                changes.append(f"{label}: '{old or ''}' -> '{new or ''}'")
        if not changes:
            return NO_CHANGES
        return "Changed " + "; ".join(changes)


# ============================================================
# List filters (search box and dropdowns of the inventory view)
# ============================================================

def search_cameras(
    cameras: Iterable[Camera],
    term: Optional[str] = None,
    status: Optional[str] = None,
    type: Optional[str] = None,
    location: Optional[str] = None,
    recorder_id: Optional[str] = None,
) -> List[Camera]:
    """Text search over name/IP/location combined with exact-match filters."""
    needle = (term or "").strip().lower()
    results = []
    for camera in cameras:
        if needle and not any(needle in v.lower() for v in (camera.name, camera.ip, camera.location)):
            continue
        if status and camera.status != status:
            continue
        if type and camera.type != type:
            continue
        if location and camera.location != location:
            continue
        if recorder_id and camera.recorder_id != recorder_id:
            continue
        results.append(camera)
    return results


def search_recorders(
    recorders: Iterable[Recorder],
    term: Optional[str] = None,
    location: Optional[str] = None,
) -> List[Recorder]:
    needle = (term or "").strip().lower()
    results = []
    for recorder in recorders:
        if needle and not any(needle in v.lower() for v in (recorder.name, recorder.ip, recorder.location)):
            continue
        if location and recorder.location != location:
            continue
        results.append(recorder)
    return results


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def _clean_note(note: Optional[str]) -> Optional[str]:
    return (note or "").strip() or None


def _iso_date(value: Optional[str]) -> Optional[str]:
    """The value when it is a YYYY-MM-DD date, otherwise None."""
    value = (value or "").strip()
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        if value:
            logger.warning(f"Ignoring install date '{value}', expected YYYY-MM-DD")
        return None


