"""Tests for application exception handlers."""

from __future__ import annotations

import json
from typing import Any

import pytest
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from campus_events.app.exception_handlers import (
    app_exception_handler,
    generic_exception_handler,
    not_found_exception_handler,
    store_exception_handler,
)
from campus_events.core.database import NotFoundError
from campus_events.core.exceptions import ConflictException, StoreError


def _build_request(path: str = "/add-event") -> Request:
    """Create a minimal ASGI request for handler tests."""
    scope = {
        "type": "http",
        "method": "POST",
        "path": path,
        "headers": [],
        "query_string": b"",
        "client": ("test", 1234),
        "server": ("test", 80),
        "scheme": "http",
    }
    return Request(scope, lambda: None)


@pytest.fixture
def tracked(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        "campus_events.app.exception_handlers.tracking.track_error",
        lambda **payload: calls.append(payload),
    )
    return calls


@pytest.mark.asyncio
async def test_app_exception_renders_problem_detail(tracked: list[dict[str, Any]]) -> None:
    exc = ConflictException(detail="User already exists", type="user-exists", extra={"email": "a@x.com"})

    response = await app_exception_handler(_build_request("/signup"), exc)

    body = json.loads(response.body)
    assert response.status_code == 409
    assert body["type"] == "user-exists"
    assert body["title"] == "Conflict"
    assert body["detail"] == "User already exists"
    assert body["email"] == "a@x.com"
    assert tracked[0]["error_type"] == "user-exists"


@pytest.mark.asyncio
async def test_not_found_uses_model_name(tracked: list[dict[str, Any]]) -> None:
    exc = NotFoundError("Event", {"id": "3f0c"})

    response = await not_found_exception_handler(_build_request("/events/3f0c"), exc)

    body = json.loads(response.body)
    assert response.status_code == 404
    assert body["type"] == "event-not-found"
    assert body["detail"] == "Event not found"
    assert body["id"] == "3f0c"


@pytest.mark.asyncio
async def test_store_failure_hides_driver_message(tracked: list[dict[str, Any]]) -> None:
    exc = OperationalError("INSERT INTO events", {}, Exception("password authentication failed"))

    response = await store_exception_handler(_build_request(), exc)

    body = json.loads(response.body)
    assert response.status_code == 503
    assert body["type"] == StoreError().type
    assert "password" not in response.body.decode()


@pytest.mark.asyncio
async def test_unexpected_exception_is_generic_500(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "campus_events.app.exception_handlers.tracking.track_unhandled_exception",
        lambda **payload: None,
    )

    response = await generic_exception_handler(_build_request(), KeyError("secret"))

    body = json.loads(response.body)
    assert response.status_code == 500
    assert body["type"] == "internal-error"
    assert "secret" not in body["detail"]
