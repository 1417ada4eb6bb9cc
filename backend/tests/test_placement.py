from __future__ import annotations

import pytest

from cammanager.errors import ValidationError

from conftest import make_camera


def test_maps_sorted_by_name(inventory) -> None:
    inventory.placements.add_map("Yard", actor="admin")
    inventory.placements.add_map("basement", actor="admin")
    inventory.placements.add_map("Ground floor", actor="admin")
    assert [m.name for m in inventory.placements.maps()] == ["basement", "Ground floor", "Yard"]


def test_add_map_requires_name(inventory) -> None:
    with pytest.raises(ValidationError):
        inventory.placements.add_map("  ", actor="admin")


def test_camera_moves_between_maps(inventory) -> None:
    camera = make_camera(inventory, "Door", "10.0.0.1")
    first = inventory.placements.add_map("First", actor="admin")
    second = inventory.placements.add_map("Second", actor="admin")

    inventory.placements.set_position(camera.id, 10, 10, first.id)
    inventory.placements.set_position(camera.id, 55.5, 70, second.id)

    assert inventory.placements.positions_on(first.id) == []
    position = inventory.placements.position(camera.id)
    assert (position.map_id, position.x, position.y) == (second.id, 55.5, 70)


def test_position_on_unknown_map(inventory) -> None:
    with pytest.raises(ValidationError):
        inventory.placements.set_position("cam_x", 1, 1, "map_missing")


def test_delete_map_removes_only_its_positions(inventory) -> None:
    a = make_camera(inventory, "A", "10.0.0.1")
    b = make_camera(inventory, "B", "10.0.0.2")
    c = make_camera(inventory, "C", "10.0.0.3")
    first = inventory.placements.add_map("First", actor="admin")
    second = inventory.placements.add_map("Second", actor="admin")
    inventory.placements.set_position(a.id, 1, 1, first.id)
    inventory.placements.set_position(b.id, 2, 2, first.id)
    inventory.placements.set_position(c.id, 3, 3, second.id)

    assert inventory.placements.delete_map(first.id, actor="admin") is True

    assert inventory.placements.position(a.id) is None
    assert inventory.placements.position(b.id) is None
    assert inventory.placements.position(c.id) is not None
    assert "2 camera positions removed" in inventory.audit.entries()[0].details
    assert inventory.placements.delete_map(first.id, actor="admin") is False


def test_unplaced(inventory) -> None:
    a = make_camera(inventory, "A", "10.0.0.1")
    b = make_camera(inventory, "B", "10.0.0.2")
    site_map = inventory.placements.add_map("First", actor="admin")
    inventory.placements.set_position(a.id, 1, 1, site_map.id)

    assert inventory.placements.unplaced([a.id, b.id]) == [b.id]


def test_rename_and_image(inventory) -> None:
    site_map = inventory.placements.add_map("First", actor="admin")

    renamed = inventory.placements.rename_map(site_map.id, "Ground floor", actor="admin")
    assert renamed.name == "Ground floor"
    assert inventory.placements.rename_map("map_missing", "X", actor="admin") is None

    with_image = inventory.placements.update_map_image(site_map.id, "data:image/png;base64,AAAA", actor="admin")
    assert with_image.image.startswith("data:image/png")
    cleared = inventory.placements.update_map_image(site_map.id, None, actor="admin")
    assert cleared.image is None
