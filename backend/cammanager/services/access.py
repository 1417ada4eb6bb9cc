"""
CamManager - Access Control Filter
Which devices a given account may see
"""
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Protocol, TypeVar

from cammanager.models.user import User


class Located(Protocol):
    location: str


DeviceT = TypeVar("DeviceT", bound=Located)


@dataclass(frozen=True)
class Capability:
    """
    Resolved visibility of one account.

    Admins get `all_locations`; everybody else is restricted to an explicit
    set, and an empty set means nothing is visible (fail-closed).
    """
    all_locations: bool
    locations: FrozenSet[str] = frozenset()

    def allows(self, location: str) -> bool:
        return self.all_locations or location in self.locations


NOTHING = Capability(all_locations=False)
EVERYTHING = Capability(all_locations=True)


def resolve_capability(user: Optional[User]) -> Capability:
    """Compute the capability once; allowed_locations is ignored for admins."""
    if user is None:
        return NOTHING
    if user.is_admin:
        return EVERYTHING
    if not user.allowed_locations:
        return NOTHING
    return Capability(all_locations=False, locations=frozenset(user.allowed_locations))


def filter_visible(capability: Capability, devices: Iterable[DeviceT]) -> List[DeviceT]:
    if capability.all_locations:
        return list(devices)
    return [d for d in devices if capability.allows(d.location)]


def visible_cameras(user: Optional[User], cameras: Iterable[DeviceT]) -> List[DeviceT]:
    return filter_visible(resolve_capability(user), cameras)


def visible_recorders(user: Optional[User], recorders: Iterable[DeviceT]) -> List[DeviceT]:
    return filter_visible(resolve_capability(user), recorders)
