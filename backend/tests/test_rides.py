"""
Tests for ride endpoints.
"""

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from carpool.db.session import commit_and_run_hooks, rollback_and_discard_hooks, run_after_commit
from carpool.models import Ride
from carpool.services import cache_service

RIDES_URL = "/api/v1/rides/"


def _ride_body(**overrides) -> dict:
    body = {
        "title": "Commute to Salem",
        "start_location": "Portland",
        "end_location": "Salem",
        "departure_date": (date.today() + timedelta(days=3)).isoformat(),
        "departure_time": "07:45",
        "total_seats": 3,
        "price_per_seat": "12.50",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_ride(client: AsyncClient, driver_headers, driver):
    response = await client.post(RIDES_URL, json=_ride_body(), headers=driver_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["driver_id"] == str(driver.id)
    assert data["total_seats"] == 3
    assert data["available_seats"] == 3
    assert data["status"] == "active"


@pytest.mark.asyncio
async def test_create_ride_without_seat_tracking(client: AsyncClient, driver_headers):
    response = await client.post(RIDES_URL, json=_ride_body(track_seats=False), headers=driver_headers)
    assert response.status_code == 201
    assert response.json()["available_seats"] is None


@pytest.mark.asyncio
async def test_create_ride_in_the_past(client: AsyncClient, driver_headers):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    response = await client.post(RIDES_URL, json=_ride_body(departure_date=yesterday), headers=driver_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_ride_requires_profile(client: AsyncClient, auth_headers_for):
    response = await client.post(RIDES_URL, json=_ride_body(), headers=auth_headers_for(uuid.uuid4()))
    assert response.status_code == 403
    assert response.json()["detail"] == "You must complete your profile before posting a ride"


@pytest.mark.asyncio
async def test_create_ride_too_many_seats(client: AsyncClient, driver_headers):
    response = await client.post(RIDES_URL, json=_ride_body(total_seats=11), headers=driver_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_rides(client: AsyncClient, passenger_headers, make_ride):
    await make_ride(title="Early")
    await make_ride(status="cancelled", title="Called off")

    response = await client.get(RIDES_URL, headers=passenger_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["cached"] is False
    assert [r["title"] for r in data["rides"]] == ["Early"]


@pytest.mark.asyncio
async def test_get_ride(client: AsyncClient, passenger_headers, make_ride):
    ride = await make_ride(available_seats=2)
    response = await client.get(f"{RIDES_URL}{ride.id}", headers=passenger_headers)
    assert response.status_code == 200
    assert response.json()["available_seats"] == 2


@pytest.mark.asyncio
async def test_get_missing_ride(client: AsyncClient, passenger_headers):
    response = await client.get(f"{RIDES_URL}{uuid.uuid4()}", headers=passenger_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Ride not found"


@pytest.mark.asyncio
async def test_update_ride(client: AsyncClient, driver_headers, make_ride):
    ride = await make_ride(available_seats=2, total_seats=4)
    response = await client.patch(
        f"{RIDES_URL}{ride.id}",
        json={"available_seats": 1, "status": "cancelled"},
        headers=driver_headers,
    )
    assert response.status_code == 200
    assert response.json()["available_seats"] == 1
    assert response.json()["status"] == "cancelled"


@pytest.mark.asyncio
async def test_update_ride_seats_above_total(client: AsyncClient, driver_headers, make_ride):
    ride = await make_ride(available_seats=2, total_seats=4)
    response = await client.patch(f"{RIDES_URL}{ride.id}", json={"total_seats": 1}, headers=driver_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_ride_not_driver(client: AsyncClient, passenger_headers, make_ride):
    ride = await make_ride()
    response = await client.patch(f"{RIDES_URL}{ride.id}", json={"title": "Mine now"}, headers=passenger_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["total_seats", "status"])
async def test_update_ride_rejects_null(client: AsyncClient, db_session, driver_headers, make_ride, field):
    ride = await make_ride(available_seats=2, total_seats=4)
    ride_id = ride.id

    response = await client.patch(f"{RIDES_URL}{ride_id}", json={field: None}, headers=driver_headers)
    assert response.status_code == 400

    await db_session.refresh(ride)
    assert ride.total_seats == 4
    assert ride.status == "active"


@pytest.mark.asyncio
async def test_update_ride_can_stop_tracking_seats(client: AsyncClient, driver_headers, make_ride):
    ride = await make_ride(available_seats=2, total_seats=4)
    response = await client.patch(f"{RIDES_URL}{ride.id}", json={"available_seats": None}, headers=driver_headers)
    assert response.status_code == 200
    assert response.json()["available_seats"] is None


@pytest.mark.asyncio
async def test_delete_ride(client: AsyncClient, driver_headers, passenger_headers, make_ride):
    ride = await make_ride()
    ride_id = ride.id

    response = await client.delete(f"{RIDES_URL}{ride_id}", headers=driver_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Ride deleted successfully"}

    gone = await client.get(f"{RIDES_URL}{ride_id}", headers=passenger_headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_delete_ride_not_driver(client: AsyncClient, db_session, passenger_headers, make_ride):
    ride = await make_ride()
    ride_id = ride.id

    response = await client.delete(f"{RIDES_URL}{ride_id}", headers=passenger_headers)
    assert response.status_code == 403

    assert await db_session.get(Ride, ride_id) is not None


@pytest.mark.asyncio
async def test_delete_missing_ride(client: AsyncClient, driver_headers):
    response = await client.delete(f"{RIDES_URL}{uuid.uuid4()}", headers=driver_headers)
    assert response.status_code == 404


# --- Listing cache invalidation ---


@pytest.fixture
def invalidations(db_session, monkeypatch):
    """Records, for each invalidation, whether the request's transaction was still open."""
    seen = []

    async def recording_invalidate():
        seen.append(db_session.in_transaction())

    monkeypatch.setattr(cache_service, "invalidate_ride_cache", recording_invalidate)
    return seen


@pytest.mark.asyncio
async def test_ride_writes_invalidate_after_commit(client: AsyncClient, driver_headers, make_ride, invalidations):
    ride = await make_ride()

    await client.post(RIDES_URL, json=_ride_body(), headers=driver_headers)
    await client.patch(f"{RIDES_URL}{ride.id}", json={"title": "Renamed run"}, headers=driver_headers)
    await client.delete(f"{RIDES_URL}{ride.id}", headers=driver_headers)

    assert invalidations == [False, False, False]


@pytest.mark.asyncio
async def test_booking_approval_invalidates_after_commit(
    client: AsyncClient, driver_headers, make_ride, make_booking, invalidations
):
    ride = await make_ride(available_seats=2)
    booking = await make_booking(ride, "pending")

    response = await client.patch(f"/api/v1/bookings/{booking.id}", json={"action": "approve"}, headers=driver_headers)
    assert response.status_code == 200
    assert invalidations == [False]


@pytest.mark.asyncio
async def test_failed_write_does_not_invalidate(client: AsyncClient, driver_headers, make_ride, invalidations):
    ride = await make_ride(available_seats=2, total_seats=4)
    response = await client.patch(f"{RIDES_URL}{ride.id}", json={"total_seats": 1}, headers=driver_headers)
    assert response.status_code == 400
    assert invalidations == []


@pytest.mark.asyncio
async def test_rolled_back_hooks_are_discarded(db_session):
    calls = []

    async def hook():
        calls.append("ran")

    run_after_commit(db_session, hook)
    run_after_commit(db_session, hook)
    await rollback_and_discard_hooks(db_session)
    await commit_and_run_hooks(db_session)
    assert calls == []

    run_after_commit(db_session, hook)
    run_after_commit(db_session, hook)
    await commit_and_run_hooks(db_session)
    assert calls == ["ran"]


@pytest.mark.asyncio
async def test_failing_hook_does_not_fail_the_commit(db_session, make_ride):
    ride = await make_ride()
    ride_id = ride.id

    async def broken_hook():
        raise ConnectionError("redis went away")

    ride.title = "Still saved"
    run_after_commit(db_session, broken_hook)
    await commit_and_run_hooks(db_session)

    db_session.expire_all()
    assert (await db_session.get(Ride, ride_id)).title == "Still saved"
