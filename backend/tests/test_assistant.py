from __future__ import annotations

import asyncio
import json

import httpx

from cammanager.services.assistant import (
    APOLOGY_MESSAGE,
    EMPTY_ANSWER_MESSAGE,
    MISSING_KEY_MESSAGE,
    AssistantService,
    build_context,
)

from conftest import make_camera, make_recorder


def _service(handler) -> AssistantService:
    return AssistantService(
        api_key="test-key",
        model="test-model",
        base_url="https://llm.test/v1beta",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


def test_context_contains_snapshot(inventory) -> None:
    make_recorder(inventory, "NVR 1", "10.0.0.100")
    make_camera(inventory, "Door", "10.0.0.1", install_date="2024-02-01")

    context = build_context(inventory.devices.cameras(), inventory.devices.recorders())

    assert '"name": "NVR 1"' in context
    assert '"installDate": "2024-02-01"' in context
    assert "Markdown" in context


def test_missing_key() -> None:
    service = AssistantService(api_key="")
    assert asyncio.run(service.ask("How many cameras?", [], [])) == MISSING_KEY_MESSAGE


def test_answer_is_returned(inventory) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "You have "}, {"text": "**1** camera."}]}}]
        })

    make_camera(inventory, "Door", "10.0.0.1")
    answer = asyncio.run(_service(handler).ask("How many cameras?", inventory.devices.cameras(), []))

    assert answer == "You have **1** camera."
    assert seen["url"].startswith("https://llm.test/v1beta/models/test-model:generateContent")
    assert "key=test-key" in seen["url"]
    assert seen["body"]["contents"][-1]["parts"][0]["text"] == "How many cameras?"


def test_http_error_becomes_apology() -> None:
    service = _service(lambda request: httpx.Response(500, json={"error": "boom"}))
    assert asyncio.run(service.ask("hi", [], [])) == APOLOGY_MESSAGE


def test_network_error_becomes_apology() -> None:
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert asyncio.run(_service(handler).ask("hi", [], [])) == APOLOGY_MESSAGE


def test_empty_answer() -> None:
    service = _service(lambda request: httpx.Response(200, json={"candidates": []}))
    assert asyncio.run(service.ask("hi", [], [])) == EMPTY_ANSWER_MESSAGE
