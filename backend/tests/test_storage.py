from __future__ import annotations

import pytest
from sqlalchemy import text

from cammanager.database import init_db, make_engine, make_session_factory
from cammanager.errors import StorageError
from cammanager.schemas.user import UserSave
from cammanager.services.audit import AuditLog
from cammanager.services.auth import SessionGateway
from cammanager.services.storage import SqlKeyValueStore


@pytest.fixture
def sql_store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(engine)
    yield SqlKeyValueStore(make_session_factory(engine))
    engine.dispose()


def test_get_missing_key(sql_store) -> None:
    assert sql_store.get("nothing") is None


def test_set_then_overwrite(sql_store) -> None:
    sql_store.set("k", "one")
    sql_store.set("k", "two")
    assert sql_store.get("k") == "two"


def test_users_persist_through_sqlite(sql_store) -> None:
    gateway = SessionGateway(sql_store, AuditLog())
    gateway.save_user(UserSave(username="bob", password="abc", full_name="Bob"), actor="admin")

    reloaded = SessionGateway(sql_store, AuditLog())
    assert "bob" in [u.username for u in reloaded.users()]


def test_missing_table_raises_storage_error() -> None:
    engine = make_engine("sqlite://")
    store = SqlKeyValueStore(make_session_factory(engine))
    with pytest.raises(StorageError):
        store.get("k")

    # The session gateway falls back to the built-in accounts
    gateway = SessionGateway(store, AuditLog())
    assert len(gateway.users()) == 2

    init_db(engine)
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM kv_store")).scalar() == 0
