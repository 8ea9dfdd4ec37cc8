"""API tests for signup and signin."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from campus_events.features.users.repository import UserRepository

if TYPE_CHECKING:
    from httpx import AsyncClient

    from tests.utils import FakeEmailClient

ADA = {"name": "Ada", "email": "ada@x.com", "password": "s3cret"}


@pytest.mark.asyncio
async def test_signup_and_signin(client: AsyncClient) -> None:
    signup = await client.post("/signup", json=ADA)
    signin = await client.post("/signin", json={"email": "ada@x.com", "password": "s3cret"})

    assert signup.status_code == 201
    assert signup.json()["message"] == "Signup successful"
    user = signup.json()["user"]
    assert user["email"] == "ada@x.com"
    assert "password" not in user
    assert "password_hash" not in user

    assert signin.status_code == 200
    assert signin.json()["message"] == "Login successful"
    assert signin.json()["user"]["id"] == user["id"]


@pytest.mark.asyncio
async def test_duplicate_signup_is_conflict(client: AsyncClient) -> None:
    await client.post("/signup", json=ADA)

    response = await client.post("/signup", json={**ADA, "email": "ADA@x.com"})

    assert response.status_code == 409
    assert response.json()["type"] == "user-exists"
    assert response.json()["detail"] == "User already exists"


@pytest.mark.asyncio
async def test_signup_race_lost_at_insert_is_conflict(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    await client.post("/signup", json=ADA)

    async def _missing(self, session, email):
        return None

    monkeypatch.setattr(UserRepository, "get_by_email", _missing)
    response = await client.post("/signup", json=ADA)

    assert response.status_code == 409
    assert response.json()["type"] == "user-exists"


@pytest.mark.asyncio
async def test_wrong_password_is_unauthorized(client: AsyncClient) -> None:
    await client.post("/signup", json=ADA)

    response = await client.post("/signin", json={"email": "ada@x.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["type"] == "invalid-credentials"


@pytest.mark.asyncio
async def test_new_users_receive_event_announcements(
    client: AsyncClient, email_client: FakeEmailClient
) -> None:
    await client.post("/signup", json=ADA)

    await client.post("/add-event", json={"title": "Hack Night"})

    assert email_client.recipients == ["ada@x.com"]
