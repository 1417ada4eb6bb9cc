"""
CamManager - Taxonomy Kinds
The three shared enumerations referenced by devices
"""
import enum


class TaxonomyKind(str, enum.Enum):
    """Shared, renameable string enumerations."""
    LOCATION = "location"
    TYPE = "type"
    STATUS = "status"

    @property
    def label(self) -> str:
        """Human-readable name used in log details."""
        return {
            TaxonomyKind.LOCATION: "location",
            TaxonomyKind.TYPE: "camera type",
            TaxonomyKind.STATUS: "status",
        }[self]


# First entry of each list is the default applied by bulk import
DEFAULT_STATUSES = ["Active", "Signal Lost", "Maintenance"]
DEFAULT_CAMERA_TYPES = ["Bullet", "Dome", "PTZ"]
DEFAULT_LOCATION = "Unassigned"
