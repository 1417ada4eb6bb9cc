from __future__ import annotations

import json

import pytest

from cammanager.errors import DuplicateUsernameError, InvalidCredentialsError, StorageError, ValidationError
from cammanager.models.settings import USERS_KEY
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.schemas.user import UserSave
from cammanager.services.access import visible_cameras
from cammanager.services.audit import AuditLog
from cammanager.services.auth import SessionGateway
from cammanager.services.storage import InMemoryKeyValueStore

from conftest import make_camera


class BrokenStore:
    """Key-value store whose backend is down."""

    def get(self, key):
        raise StorageError("disk unavailable")

    def set(self, key, value):
        raise StorageError("disk unavailable")


def test_defaults_when_nothing_stored() -> None:
    gateway = SessionGateway(InMemoryKeyValueStore(), AuditLog())
    assert sorted(u.username for u in gateway.users()) == ["admin", "staff"]


@pytest.mark.parametrize("raw", ["not json", "[]", json.dumps([{"id": "x"}])])
def test_defaults_when_stored_users_unusable(raw) -> None:
    gateway = SessionGateway(InMemoryKeyValueStore({USERS_KEY: raw}), AuditLog())
    assert sorted(u.username for u in gateway.users()) == ["admin", "staff"]


def test_storage_failure_keeps_working_in_memory() -> None:
    gateway = SessionGateway(BrokenStore(), AuditLog())
    gateway.login("admin", "123")
    user = gateway.save_user(UserSave(username="bob", password="abc", full_name="Bob"), actor="admin")
    assert gateway.find_user(user.id) is not None


def test_login_success_sets_current_user_and_logs() -> None:
    audit = AuditLog()
    gateway = SessionGateway(InMemoryKeyValueStore(), audit)
    user = gateway.login("admin", "123")
    assert gateway.current_user == user
    assert len(audit) == 1


def test_wrong_password_changes_nothing() -> None:
    audit = AuditLog()
    gateway = SessionGateway(InMemoryKeyValueStore(), audit)
    with pytest.raises(InvalidCredentialsError):
        gateway.login("admin", "wrong")
    assert gateway.current_user is None
    assert len(audit) == 0


def test_login_is_exact_match() -> None:
    gateway = SessionGateway(InMemoryKeyValueStore(), AuditLog())
    with pytest.raises(InvalidCredentialsError):
        gateway.login("Admin", "123")


def test_blank_full_name_rejected_without_insert(inventory) -> None:
    before = inventory.gateway.users()
    with pytest.raises(ValidationError):
        inventory.gateway.save_user(UserSave(username="bob", full_name="", role="user"), actor="admin")
    assert inventory.gateway.users() == before


@pytest.mark.parametrize("data", [
    {"username": "bob", "full_name": "Bob"},                          # no password on create
    {"username": "bo b", "password": "abc", "full_name": "Bob"},      # whitespace
    {"username": "   ", "password": "abc", "full_name": "Bob"},
])
def test_invalid_new_users(inventory, data) -> None:
    with pytest.raises(ValidationError):
        inventory.gateway.save_user(UserSave(**data), actor="admin")


def test_username_unique_ignoring_case(inventory) -> None:
    with pytest.raises(DuplicateUsernameError):
        inventory.gateway.save_user(UserSave(username="ADMIN", password="abc", full_name="Other"), actor="admin")


def test_update_keeps_password_when_blank(inventory, store) -> None:
    staff = next(u for u in inventory.gateway.users() if u.username == "staff")
    updated = inventory.gateway.save_user(
        UserSave(id=staff.id, username="staff", password="", full_name="Staff Member",
                 allowed_locations=["Yard", "Yard", " HQ "]),
        actor="admin",
    )
    assert updated.password == "123"
    assert updated.allowed_locations == ["Yard", "HQ"]

    stored = json.loads(store.data[USERS_KEY])
    assert next(u for u in stored if u["id"] == staff.id)["full_name"] == "Staff Member"


def test_users_survive_a_new_session(store, inventory) -> None:
    inventory.gateway.save_user(UserSave(username="bob", password="abc", full_name="Bob"), actor="admin")

    reloaded = SessionGateway(store, AuditLog())
    bob = reloaded.login("bob", "abc")
    assert bob.full_name == "Bob"


def test_cannot_delete_current_user(inventory) -> None:
    admin = inventory.gateway.login("admin", "123")
    assert inventory.gateway.delete_user(admin.id, actor="admin") is False
    assert inventory.gateway.find_user(admin.id) is not None


def test_delete_other_user(inventory) -> None:
    inventory.gateway.login("admin", "123")
    staff = next(u for u in inventory.gateway.users() if u.username == "staff")
    assert inventory.gateway.delete_user(staff.id, actor="admin") is True
    assert inventory.gateway.delete_user(staff.id, actor="admin") is False


def test_change_password(inventory) -> None:
    inventory.gateway.login("staff", "123")
    with pytest.raises(ValidationError):
        inventory.gateway.change_password("  ")
    with pytest.raises(ValidationError):
        inventory.gateway.change_password("abcd", "abce")

    inventory.gateway.change_password("abcd", "abcd")
    inventory.gateway.logout()
    assert inventory.gateway.current_user is None
    assert inventory.gateway.login("staff", "abcd").username == "staff"


def test_login_over_active_session_logs_previous_user_out() -> None:
    audit = AuditLog()
    gateway = SessionGateway(InMemoryKeyValueStore(), audit)
    gateway.login("admin", "123")
    gateway.login("staff", "123")

    history = [(e.details, e.user) for e in reversed(audit.entries())]
    assert history == [("login", "admin"), ("logout", "admin"), ("login", "staff")]
    assert gateway.current_user.username == "staff"


def test_allowed_locations_take_stored_spelling(inventory) -> None:
    make_camera(inventory, "Yard cam", "10.0.0.1", location="Yard")
    bob = inventory.gateway.save_user(
        UserSave(username="bob", password="abc", full_name="Bob", role="user", allowed_locations=["yard", "YARD"]),
        actor="admin",
    )
    assert bob.allowed_locations == ["Yard"]
    assert [c.name for c in visible_cameras(bob, inventory.devices.cameras())] == ["Yard cam"]

    inventory.taxonomy.rename(TaxonomyKind.LOCATION, "Yard", "Back Yard", actor="admin")

    bob = inventory.gateway.find_user(bob.id)
    assert bob.allowed_locations == ["Back Yard"]
    assert [c.name for c in visible_cameras(bob, inventory.devices.cameras())] == ["Yard cam"]


def test_unknown_allowed_location_rejected(inventory) -> None:
    before = inventory.gateway.users()
    with pytest.raises(ValidationError):
        inventory.gateway.save_user(
            UserSave(username="bob", password="abc", full_name="Bob", allowed_locations=["Moon"]),
            actor="admin",
        )
    assert inventory.gateway.users() == before


def test_rename_reaches_case_variant_grants() -> None:
    staff = {"id": "usr_9", "username": "old", "password": "123", "full_name": "Old",
             "role": "user", "allowed_locations": ["yard"]}
    store = InMemoryKeyValueStore({USERS_KEY: json.dumps([staff])})
    gateway = SessionGateway(store, AuditLog())

    assert gateway.count_references(TaxonomyKind.LOCATION, "Yard") == {"users": 1}
    gateway.rename_references(TaxonomyKind.LOCATION, "Yard", "Back Yard")
    assert gateway.find_user("usr_9").allowed_locations == ["Back Yard"]
