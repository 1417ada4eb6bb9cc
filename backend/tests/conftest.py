from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cammanager.config import Settings
from cammanager.main import create_app
from cammanager.models.taxonomy import TaxonomyKind
from cammanager.schemas.camera import CameraSave, RecorderSave
from cammanager.services.assistant import AssistantService
from cammanager.services.inventory import Inventory, build_inventory
from cammanager.services.storage import InMemoryKeyValueStore


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def inventory(store: InMemoryKeyValueStore) -> Inventory:
    inv = build_inventory(store)
    for location in ("HQ", "Yard", "Technical Warehouse"):
        inv.taxonomy.ensure(TaxonomyKind.LOCATION, location)
    return inv


def make_camera(inventory: Inventory, name: str, ip: str, location: str = "HQ", **fields):
    data = {"name": name, "ip": ip, "location": location, "type": "Dome", "status": "Active"}
    data.update(fields)
    return inventory.devices.save_camera(CameraSave(**data), actor="admin")


def make_recorder(inventory: Inventory, name: str, ip: str, location: str = "HQ", **fields):
    data = {"name": name, "ip": ip, "location": location}
    data.update(fields)
    return inventory.devices.save_recorder(RecorderSave(**data), actor="admin")


@pytest.fixture
def client(inventory: Inventory):
    settings = Settings(seed_demo_data=False, gemini_api_key=None)
    app = create_app(settings=settings, inventory=inventory, assistant=AssistantService(api_key=""))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    response = client.post("/api/auth/login", json={"username": "admin", "password": "123"})
    assert response.status_code == 200
    return client


@pytest.fixture
def staff_client(client: TestClient) -> TestClient:
    response = client.post("/api/auth/login", json={"username": "staff", "password": "123"})
    assert response.status_code == 200
    return client
