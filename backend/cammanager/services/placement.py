"""
CamManager - Map Placement Store
Floor-plan maps and where each camera sits on them

A camera is placed on at most one map at a time; a camera without a
position is "unplaced" and can be dropped onto any map.
"""
import logging
import uuid
from typing import Dict, Iterable, List, Optional

from cammanager.errors import ValidationError
from cammanager.models.audit import LogAction, TargetType
from cammanager.models.map import CameraPosition, SiteMap
from cammanager.services.audit import AuditLog

logger = logging.getLogger(__name__)


class MapPlacementStore:
    """Owns site maps and camera positions."""

    def __init__(self, audit: AuditLog) -> None:
        self._audit = audit
        self._maps: Dict[str, SiteMap] = {}
        self._positions: Dict[str, CameraPosition] = {}

    # ============================================================
    # Maps
    # ============================================================

    def maps(self) -> List[SiteMap]:
        return sorted(self._maps.values(), key=lambda m: m.name.lower())

    def find_map(self, map_id: str) -> Optional[SiteMap]:
        return self._maps.get(map_id)

    def add_map(self, name: str, actor: Optional[str]) -> SiteMap:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Map name is required")

        site_map = SiteMap(id=f"map_{uuid.uuid4().hex[:8]}", name=name)
        self._maps[site_map.id] = site_map
        self._audit.append(LogAction.ADD, TargetType.MAP, name, f"Added map '{name}'", actor)
        return site_map

    def rename_map(self, map_id: str, name: str, actor: Optional[str]) -> Optional[SiteMap]:
        site_map = self._maps.get(map_id)
        if site_map is None:
            return None
        name = (name or "").strip()
        if not name:
            raise ValidationError("Map name is required")
        if name == site_map.name:
            return site_map

        renamed = site_map.model_copy(update={"name": name})
        self._maps[map_id] = renamed
        self._audit.append(
            LogAction.EDIT, TargetType.MAP, name, f"Renamed map '{site_map.name}' to '{name}'", actor
        )
        return renamed

    def update_map_image(self, map_id: str, image: Optional[str], actor: Optional[str]) -> Optional[SiteMap]:
        """Attach, replace or (with None) remove the map's floor-plan image."""
        site_map = self._maps.get(map_id)
        if site_map is None:
            return None

        updated = site_map.model_copy(update={"image": image})
        self._maps[map_id] = updated
        details = "Uploaded floor-plan image" if image else "Removed floor-plan image"
        self._audit.append(LogAction.EDIT, TargetType.MAP, site_map.name, details, actor)
        return updated

    def delete_map(self, map_id: str, actor: Optional[str]) -> bool:
        """Delete a map together with every camera position on it."""
        site_map = self._maps.pop(map_id, None)
        if site_map is None:
            return False

        placed = [cid for cid, pos in self._positions.items() if pos.map_id == map_id]
        for camera_id in placed:
            del self._positions[camera_id]

        self._audit.append(
            LogAction.DELETE,
            TargetType.MAP,
            site_map.name,
            f"Deleted map '{site_map.name}' ({len(placed)} camera positions removed)",
            actor,
        )
        return True

    # ============================================================
    # Camera positions
    # ============================================================

    def set_position(self, camera_id: str, x: float, y: float, map_id: str) -> CameraPosition:
        """
        Place or move a camera.

        x and y are percentages of the map bounds. The caller clamps them
        to 0-100; the drop target is the one that knows the geometry.
        """
        if map_id not in self._maps:
            raise ValidationError(f"Map '{map_id}' does not exist")

        position = CameraPosition(camera_id=camera_id, map_id=map_id, x=x, y=y)
        self._positions[camera_id] = position
        logger.debug(f"Camera {camera_id} positioned on map {map_id} at ({x:.1f}, {y:.1f})")
        return position

    def clear_position(self, camera_id: str) -> bool:
        return self._positions.pop(camera_id, None) is not None

    def position(self, camera_id: str) -> Optional[CameraPosition]:
        return self._positions.get(camera_id)

    def positions_on(self, map_id: str) -> List[CameraPosition]:
        return [pos for pos in self._positions.values() if pos.map_id == map_id]

    def unplaced(self, camera_ids: Iterable[str]) -> List[str]:
        """Ids from `camera_ids` that have no position on any map."""
        return [cid for cid in camera_ids if cid not in self._positions]
