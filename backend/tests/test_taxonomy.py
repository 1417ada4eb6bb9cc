from __future__ import annotations

import pytest

from cammanager.errors import DuplicateNameError, EmptyNameError, InUseError
from cammanager.models.taxonomy import DEFAULT_CAMERA_TYPES, DEFAULT_STATUSES, TaxonomyKind
from cammanager.schemas.user import UserSave

from conftest import make_camera, make_recorder


def test_defaults_registered(inventory) -> None:
    assert inventory.taxonomy.values(TaxonomyKind.STATUS) == DEFAULT_STATUSES
    assert inventory.taxonomy.values(TaxonomyKind.TYPE) == DEFAULT_CAMERA_TYPES


def test_add_rejects_blank_and_case_insensitive_duplicate(inventory) -> None:
    with pytest.raises(EmptyNameError):
        inventory.taxonomy.add(TaxonomyKind.LOCATION, "   ", actor="admin")
    with pytest.raises(DuplicateNameError):
        inventory.taxonomy.add(TaxonomyKind.LOCATION, "hq", actor="admin")
    assert inventory.taxonomy.values(TaxonomyKind.LOCATION).count("HQ") == 1


def test_add_trims_and_logs(inventory) -> None:
    before = len(inventory.audit)
    value = inventory.taxonomy.add(TaxonomyKind.LOCATION, "  Gate  ", actor="admin")
    assert value == "Gate"
    assert len(inventory.audit) == before + 1
    entry = inventory.audit.entries()[0]
    assert entry.action == "Add"
    assert entry.target_type == "Location"
    assert entry.user == "admin"


def test_kinds_are_independent(inventory) -> None:
    inventory.taxonomy.add(TaxonomyKind.LOCATION, "Maintenance", actor="admin")
    assert inventory.taxonomy.contains(TaxonomyKind.STATUS, "Maintenance")
    assert inventory.taxonomy.contains(TaxonomyKind.LOCATION, "Maintenance")


def test_rename_rewrites_every_reference(inventory) -> None:
    make_recorder(inventory, "NVR", "10.0.0.100", location="HQ")
    make_camera(inventory, "Door", "10.0.0.1", location="HQ")
    make_camera(inventory, "Roof", "10.0.0.2", location="HQ")
    make_camera(inventory, "Gate", "10.0.0.3", location="Yard")

    assert inventory.taxonomy.rename(TaxonomyKind.LOCATION, "HQ", "Headquarters", actor="admin") == "Headquarters"

    locations = inventory.taxonomy.values(TaxonomyKind.LOCATION)
    assert "HQ" not in locations
    assert "Headquarters" in locations
    assert not [c for c in inventory.devices.cameras() if c.location == "HQ"]
    assert len([c for c in inventory.devices.cameras() if c.location == "Headquarters"]) == 2
    assert inventory.devices.recorders()[0].location == "Headquarters"

    entry = inventory.audit.entries()[0]
    assert entry.action == "Edit"
    assert "2 cameras" in entry.details
    assert "1 recorders" in entry.details


def test_rename_keeps_registry_position(inventory) -> None:
    inventory.taxonomy.rename(TaxonomyKind.LOCATION, "Yard", "Back Yard", actor="admin")
    assert inventory.taxonomy.values(TaxonomyKind.LOCATION) == ["HQ", "Back Yard", "Technical Warehouse"]


def test_rename_cascades_into_allowed_locations(inventory) -> None:
    inventory.taxonomy.rename(TaxonomyKind.LOCATION, "Yard", "Outdoor", actor="admin")
    staff = next(u for u in inventory.gateway.users() if u.username == "staff")
    assert staff.allowed_locations == ["Technical Warehouse", "Outdoor"]


def test_rename_conflicts_and_noops(inventory) -> None:
    with pytest.raises(DuplicateNameError):
        inventory.taxonomy.rename(TaxonomyKind.LOCATION, "HQ", "yard", actor="admin")
    with pytest.raises(EmptyNameError):
        inventory.taxonomy.rename(TaxonomyKind.LOCATION, "HQ", " ", actor="admin")

    before = len(inventory.audit)
    assert inventory.taxonomy.rename(TaxonomyKind.LOCATION, "HQ", "HQ", actor="admin") is None
    assert inventory.taxonomy.rename(TaxonomyKind.LOCATION, "Nowhere", "Somewhere", actor="admin") is None
    assert len(inventory.audit) == before


def test_rename_case_only(inventory) -> None:
    make_camera(inventory, "Door", "10.0.0.1", location="HQ")
    assert inventory.taxonomy.rename(TaxonomyKind.LOCATION, "HQ", "hq", actor="admin") == "hq"
    assert inventory.devices.cameras()[0].location == "hq"


def test_remove_in_use_reports_counts_and_changes_nothing(inventory) -> None:
    make_recorder(inventory, "NVR", "10.0.0.100", location="HQ")
    make_camera(inventory, "Door", "10.0.0.1", location="HQ")
    before_log = len(inventory.audit)

    with pytest.raises(InUseError) as excinfo:
        inventory.taxonomy.remove(TaxonomyKind.LOCATION, "HQ", actor="admin")

    assert excinfo.value.cameras == 1
    assert excinfo.value.recorders == 1
    assert "HQ" in inventory.taxonomy.values(TaxonomyKind.LOCATION)
    assert len(inventory.audit) == before_log


def test_remove_unused_and_unknown(inventory) -> None:
    assert inventory.taxonomy.remove(TaxonomyKind.LOCATION, "hq", actor="admin") is True
    assert not inventory.taxonomy.contains(TaxonomyKind.LOCATION, "HQ")
    assert inventory.taxonomy.remove(TaxonomyKind.LOCATION, "Nowhere", actor="admin") is False


def test_allowed_locations_do_not_block_removal(inventory) -> None:
    inventory.gateway.save_user(
        UserSave(username="guard", password="abc", full_name="Guard", allowed_locations=["HQ"]),
        actor="admin",
    )
    assert inventory.taxonomy.usage(TaxonomyKind.LOCATION, "HQ")["users"] == 1
    assert inventory.taxonomy.remove(TaxonomyKind.LOCATION, "HQ", actor="admin") is True
