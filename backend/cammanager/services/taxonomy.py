"""
CamManager - Taxonomy Registry
Locations, camera types and statuses shared by every device record

Rename and delete are usage-aware: a rename rewrites every record that
holds the old value, a delete is refused while any record still holds it.
"""
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from cammanager.errors import DuplicateNameError, EmptyNameError, InUseError
from cammanager.models.audit import LogAction, TargetType
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.services.audit import AuditLog

logger = logging.getLogger(__name__)


TARGET_TYPES = {
    TaxonomyKind.LOCATION: TargetType.LOCATION,
    TaxonomyKind.TYPE: TargetType.TYPE,
    TaxonomyKind.STATUS: TargetType.STATUS,
}


class TaxonomyDependent(Protocol):
    """Anything holding taxonomy values that must follow renames."""

    def count_references(self, kind: TaxonomyKind, value: str) -> Dict[str, int]:
        """Count records holding `value`, keyed by record type ("cameras", "recorders"...)."""
        ...

    def rename_references(self, kind: TaxonomyKind, old: str, new: str) -> Dict[str, int]:
        """Rewrite `old` to `new` everywhere; return rewritten counts keyed like count_references."""
        ...


class TaxonomyRegistry:
    """
    Owns the three taxonomy lists.

    Values are unique per kind and compared case-insensitively; the kinds
    are independent, so a location and a status may share a name.
    """

    def __init__(self, audit: AuditLog, initial: Optional[Dict[TaxonomyKind, Iterable[str]]] = None) -> None:
        self._audit = audit
        self._values: Dict[TaxonomyKind, List[str]] = {kind: [] for kind in TaxonomyKind}
        self._dependents: List[TaxonomyDependent] = []

        for kind, values in (initial or {}).items():
            for value in values:
                self.ensure(kind, value)

    def register_dependent(self, dependent: TaxonomyDependent) -> None:
        """Subscribe a store to rename cascades and usage checks."""
        self._dependents.append(dependent)

    # ============================================================
    # Read side
    # ============================================================

    def values(self, kind: TaxonomyKind) -> List[str]:
        return list(self._values[kind])

    def canonical(self, kind: TaxonomyKind, name: Optional[str]) -> Optional[str]:
        """Stored spelling of a case-insensitive match, or None."""
        key = (name or "").strip().lower()
        for value in self._values[kind]:
            if value.lower() == key:
                return value
        return None

    def first(self, kind: TaxonomyKind) -> Optional[str]:
        """Leading value of a kind, used as the default for new records. None when empty."""
        values = self._values[kind]
        return values[0] if values else None

    def contains(self, kind: TaxonomyKind, name: Optional[str]) -> bool:
        return self.canonical(kind, name) is not None

    def usage(self, kind: TaxonomyKind, name: str) -> Dict[str, int]:
        """Reference counts across all dependents."""
        totals: Dict[str, int] = {}
        for dependent in self._dependents:
            for record_type, count in dependent.count_references(kind, name).items():
                totals[record_type] = totals.get(record_type, 0) + count
        return totals

    # ============================================================
    # Mutations
    # ============================================================

    def ensure(self, kind: TaxonomyKind, name: str) -> str:
        """
        Register `name` if it is new and return the stored spelling.

        Used by bulk import, which writes one aggregate log entry of its own.
        """
        existing = self.canonical(kind, name)
        if existing is not None:
            return existing
        value = name.strip()
        if not value:
            raise EmptyNameError(f"{kind.label.capitalize()} name cannot be empty")
        self._values[kind].append(value)
        return value

    def add(self, kind: TaxonomyKind, name: str, actor: Optional[str]) -> str:
        value = (name or "").strip()
        if not value:
            raise EmptyNameError(f"{kind.label.capitalize()} name cannot be empty")
        if self.contains(kind, value):
            raise DuplicateNameError(f"{kind.label.capitalize()} '{value}' already exists")

        self._values[kind].append(value)
        self._audit.append(
            LogAction.ADD,
            TARGET_TYPES[kind],
            value,
            f"Added {kind.label} '{value}'",
            actor,
        )
        return value

    def rename(self, kind: TaxonomyKind, old_name: str, new_name: str, actor: Optional[str]) -> Optional[str]:
        """
        Rename a value and rewrite every record that references it.

        Returns the new value, or None when there was nothing to do
        (unknown old value, or new value identical to the old one).
        """
        new_value = (new_name or "").strip()
        if not new_value:
            raise EmptyNameError(f"New {kind.label} name cannot be empty")

        old_value = self.canonical(kind, old_name)
        if old_value is None:
            logger.debug(f"Rename of unknown {kind.label} '{old_name}' ignored")
            return None

        clash = self.canonical(kind, new_value)
        if clash is not None and clash != old_value:
            raise DuplicateNameError(f"{kind.label.capitalize()} '{clash}' already exists")

        if new_value == old_value:
            return None

        self.apply_taxonomy_change(kind, old_value, new_value, actor)
        return new_value

    def apply_taxonomy_change(self, kind: TaxonomyKind, old_value: str, new_value: str, actor: Optional[str]) -> None:
        """
        Registry update, dependent rewrites and the log entry as one step.

        Callers have already validated the change; nothing in here can fail
        halfway because the dependents only rewrite in-memory fields.
        """
        values = self._values[kind]
        values[values.index(old_value)] = new_value

        rewritten: Dict[str, int] = {}
        for dependent in self._dependents:
            for record_type, count in dependent.rename_references(kind, old_value, new_value).items():
                rewritten[record_type] = rewritten.get(record_type, 0) + count

        self._audit.append(
            LogAction.EDIT,
            TARGET_TYPES[kind],
            new_value,
            f"Renamed {kind.label} '{old_value}' to '{new_value}'{_cascade_summary(rewritten)}",
            actor,
        )

    def remove(self, kind: TaxonomyKind, name: str, actor: Optional[str]) -> bool:
        """
        Delete a value nobody references.

        Raises:
            InUseError: with the camera/recorder counts still using the value
        """
        value = self.canonical(kind, name)
        if value is None:
            return False

        usage = self.usage(kind, value)
        cameras, recorders = usage.get("cameras", 0), usage.get("recorders", 0)
        if cameras or recorders:
            raise InUseError(
                f"{kind.label.capitalize()} '{value}' is used by {_counts_text(cameras, recorders)}",
                cameras=cameras,
                recorders=recorders,
            )

        self._values[kind].remove(value)
        self._audit.append(
            LogAction.DELETE,
            TARGET_TYPES[kind],
            value,
            f"Deleted {kind.label} '{value}'",
            actor,
        )
        return True


def _counts_text(cameras: int, recorders: int) -> str:
    parts: List[Tuple[int, str]] = [(cameras, "camera"), (recorders, "recorder")]
    return " and ".join(f"{n} {label}{'' if n == 1 else 's'}" for n, label in parts if n)


def _cascade_summary(rewritten: Dict[str, int]) -> str:
    touched = [f"{count} {record_type}" for record_type, count in rewritten.items() if count]
    if not touched:
        return ""
    return f" ({', '.join(touched)} updated)"
