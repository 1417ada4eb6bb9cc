from __future__ import annotations

from cammanager.models.camera import Camera
from cammanager.models.user import User, UserRole
from cammanager.services.access import (
    EVERYTHING,
    NOTHING,
    resolve_capability,
    visible_cameras,
)


def _camera(cid: str, location: str) -> Camera:
    return Camera(
        id=cid, name=cid, ip=f"10.0.0.{cid[-1]}", location=location,
        type="Dome", status="Active", install_date="2024-01-01",
    )


CAMERAS = [_camera("cam_1", "HQ"), _camera("cam_2", "Yard"), _camera("cam_3", "Dock")]


def _user(role: UserRole, locations) -> User:
    return User(id="u", username="u", full_name="U", role=role, allowed_locations=locations)


def test_admin_sees_everything_regardless_of_locations() -> None:
    admin = _user(UserRole.ADMIN, ["HQ"])
    assert resolve_capability(admin) == EVERYTHING
    assert visible_cameras(admin, CAMERAS) == CAMERAS


def test_user_sees_only_allowed_locations() -> None:
    user = _user(UserRole.USER, ["HQ", "Dock"])
    assert [c.id for c in visible_cameras(user, CAMERAS)] == ["cam_1", "cam_3"]


def test_user_without_locations_sees_nothing() -> None:
    user = _user(UserRole.USER, [])
    assert resolve_capability(user) == NOTHING
    assert visible_cameras(user, CAMERAS) == []


def test_nobody_logged_in_sees_nothing() -> None:
    assert visible_cameras(None, CAMERAS) == []


def test_location_match_is_exact() -> None:
    user = _user(UserRole.USER, ["hq"])
    assert visible_cameras(user, CAMERAS) == []
