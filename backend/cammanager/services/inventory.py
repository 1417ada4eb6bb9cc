"""
CamManager - Inventory
Composition root holding one instance of every store for the running session
"""
from dataclasses import dataclass
from typing import Optional

from cammanager.models.taxonomy import DEFAULT_CAMERA_TYPES, DEFAULT_STATUSES, TaxonomyKind
from cammanager.services.audit import AuditLog
from cammanager.services.auth import SessionGateway
from cammanager.services.devices import DeviceStore
from cammanager.services.placement import MapPlacementStore
from cammanager.services.storage import InMemoryKeyValueStore, KeyValueStore
from cammanager.services.taxonomy import TaxonomyRegistry


@dataclass
class Inventory:
    """The whole in-memory state of one session; the FastAPI app keeps it on app.state."""
    audit: AuditLog
    taxonomy: TaxonomyRegistry
    placements: MapPlacementStore
    devices: DeviceStore
    gateway: SessionGateway

    @property
    def actor(self) -> Optional[str]:
        """Username credited in the activity log for the next change."""
        user = self.gateway.current_user
        return user.username if user else None


def build_inventory(store: Optional[KeyValueStore] = None) -> Inventory:
    """
    Wire the stores together.

    The device store and the session gateway both subscribe to taxonomy
    renames, so a renamed location reaches cameras, recorders and the
    accounts scoped to it in the same step. The gateway also checks granted
    locations against the registry.
    """
    audit = AuditLog()
    taxonomy = TaxonomyRegistry(audit, initial={
        TaxonomyKind.STATUS: DEFAULT_STATUSES,
        TaxonomyKind.TYPE: DEFAULT_CAMERA_TYPES,
    })
    placements = MapPlacementStore(audit)
    devices = DeviceStore(taxonomy, placements, audit)
    gateway = SessionGateway(store if store is not None else InMemoryKeyValueStore(), audit, taxonomy)
    taxonomy.register_dependent(gateway)

    return Inventory(
        audit=audit,
        taxonomy=taxonomy,
        placements=placements,
        devices=devices,
        gateway=gateway,
    )
