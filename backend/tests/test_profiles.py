"""
Tests for profiles, blocking, and the app-level endpoints.
"""

import uuid

import pytest
from httpx import AsyncClient

from carpool.services import rate_limit_service

BLOCK_URL = "/api/v1/users/block"
UNBLOCK_URL = "/api/v1/users/unblock"


@pytest.mark.asyncio
async def test_profile_lifecycle(client: AsyncClient, auth_headers_for):
    headers = auth_headers_for(uuid.uuid4())

    missing = await client.get("/api/v1/profiles/me", headers=headers)
    assert missing.status_code == 404

    saved = await client.put(
        "/api/v1/profiles/me",
        json={"first_name": "Sam", "last_name": "Lee", "email": "sam@carpool.org", "city": "Bend"},
        headers=headers,
    )
    assert saved.status_code == 200
    assert saved.json()["is_complete"] is True

    me = await client.get("/api/v1/profiles/me", headers=headers)
    assert me.json()["first_name"] == "Sam"


@pytest.mark.asyncio
async def test_profile_requires_first_name(client: AsyncClient, passenger_headers):
    response = await client.put("/api/v1/profiles/me", json={"first_name": ""}, headers=passenger_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient):
    response = await client.get("/api/v1/profiles/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_block_and_unblock(client: AsyncClient, passenger_headers, driver_headers, passenger, driver):
    # The 409 below rolls the shared session back and expires the fixtures
    driver_id, passenger_id = str(driver.id), str(passenger.id)

    blocked = await client.post(BLOCK_URL, json={"blocked_id": driver_id}, headers=passenger_headers)
    assert blocked.status_code == 201
    assert blocked.json()["blocked_id"] == driver_id

    again = await client.post(BLOCK_URL, json={"blocked_id": driver_id}, headers=passenger_headers)
    assert again.status_code == 409

    listing = await client.get("/api/v1/users/blocked", headers=passenger_headers)
    assert [b["blocked_id"] for b in listing.json()] == [driver_id]

    # A block hides the pair from each other in both directions
    hidden = await client.get(f"/api/v1/profiles/{passenger_id}", headers=driver_headers)
    assert hidden.status_code == 404

    unblocked = await client.post(UNBLOCK_URL, json={"blocked_id": driver_id}, headers=passenger_headers)
    assert unblocked.status_code == 200
    assert unblocked.json()["success"] is True

    again = await client.post(UNBLOCK_URL, json={"blocked_id": driver_id}, headers=passenger_headers)
    assert again.status_code == 200

    visible = await client.get(f"/api/v1/profiles/{passenger_id}", headers=driver_headers)
    assert visible.status_code == 200


@pytest.mark.asyncio
async def test_block_invalid_targets(client: AsyncClient, passenger_headers, passenger):
    self_block = await client.post(BLOCK_URL, json={"blocked_id": str(passenger.id)}, headers=passenger_headers)
    assert self_block.status_code == 400

    unknown = await client.post(BLOCK_URL, json={"blocked_id": str(uuid.uuid4())}, headers=passenger_headers)
    assert unknown.status_code == 404


class CountingRedis:
    """Just enough of the redis client for the fixed-window limiter."""

    def __init__(self):
        self.counts = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        return True

    async def ttl(self, key):
        return 1200


@pytest.mark.asyncio
async def test_block_rate_limit(client: AsyncClient, passenger_headers, driver, monkeypatch):
    fake = CountingRedis()

    async def fake_get_redis():
        return fake

    monkeypatch.setattr(rate_limit_service, "get_redis", fake_get_redis)
    body = {"blocked_id": str(driver.id)}

    for _ in range(10):
        await client.post(UNBLOCK_URL, json=body, headers=passenger_headers)
        response = await client.post(BLOCK_URL, json=body, headers=passenger_headers)
        assert response.status_code == 201

    limited = await client.post(BLOCK_URL, json=body, headers=passenger_headers)
    assert limited.status_code == 429
    assert limited.headers["Retry-After"] == "1200"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.status_code == 200
    assert response.json()["cache"] == {"status": "disabled"}
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_metrics(client: AsyncClient):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_transitions_total" in response.text
