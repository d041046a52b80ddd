"""
Tests for trip reviews.
"""

import uuid
from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from carpool.models import Review

REVIEWS_URL = "/api/v1/reviews/"
COMMENT = "Smooth ride and great company"


@pytest.fixture
def completed_trip(make_ride, make_booking):
    async def _make(days_ago=2):
        ride = await make_ride(status="completed", departure_date=date.today() - timedelta(days=days_ago))
        return await make_booking(ride, "completed")

    return _make


def _body(booking_id, **overrides) -> dict:
    body = {"booking_id": str(booking_id), "rating": 5, "comment": COMMENT}
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_passenger_reviews_driver(client: AsyncClient, passenger_headers, passenger, driver, completed_trip):
    booking = await completed_trip()

    body = _body(booking.id, comment=f"  {COMMENT}  ")
    response = await client.post(REVIEWS_URL, json=body, headers=passenger_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["reviewer_id"] == str(passenger.id)
    assert data["reviewee_id"] == str(driver.id)
    assert data["reviewer_role"] == "passenger"
    assert data["reviewed_role"] == "driver"
    assert data["comment"] == COMMENT


@pytest.mark.asyncio
async def test_driver_reviews_passenger(client: AsyncClient, driver_headers, passenger, completed_trip):
    booking = await completed_trip()

    response = await client.post(REVIEWS_URL, json=_body(booking.id, rating=3), headers=driver_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["reviewee_id"] == str(passenger.id)
    assert data["reviewer_role"] == "driver"
    assert data["reviewed_role"] == "passenger"
    assert data["rating"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, detail",
    [
        ({"rating": 0}, "Rating must be between 1 and 5"),
        ({"rating": 6}, "Rating must be between 1 and 5"),
        ({"comment": "Nice ride, thanks!"}, "Comment must be at least 5 words"),
        ({"comment": "   "}, "Comment must be at least 5 words"),
    ],
)
async def test_review_input_rules(client: AsyncClient, passenger_headers, completed_trip, overrides, detail):
    booking = await completed_trip()
    response = await client.post(REVIEWS_URL, json=_body(booking.id, **overrides), headers=passenger_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == detail


@pytest.mark.asyncio
async def test_review_requires_complete_profile(client: AsyncClient, auth_headers_for):
    response = await client.post(REVIEWS_URL, json=_body(uuid.uuid4()), headers=auth_headers_for(uuid.uuid4()))
    assert response.status_code == 403
    assert response.json()["detail"] == "You must complete your profile before leaving reviews"


@pytest.mark.asyncio
async def test_review_missing_booking(client: AsyncClient, passenger_headers):
    response = await client.post(REVIEWS_URL, json=_body(uuid.uuid4()), headers=passenger_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Booking not found"


@pytest.mark.asyncio
async def test_outsider_cannot_review(client: AsyncClient, outsider_headers, completed_trip):
    booking = await completed_trip()
    response = await client.post(REVIEWS_URL, json=_body(booking.id), headers=outsider_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "You can only review trips you participated in"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["pending", "confirmed", "cancelled", "invited"])
async def test_only_completed_trips(client: AsyncClient, passenger_headers, make_ride, make_booking, status):
    ride = await make_ride(departure_date=date.today() - timedelta(days=2))
    booking = await make_booking(ride, status)

    response = await client.post(REVIEWS_URL, json=_body(booking.id), headers=passenger_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "You can only review completed trips"


@pytest.mark.asyncio
async def test_cannot_review_future_trip(client: AsyncClient, passenger_headers, make_ride, make_booking):
    ride = await make_ride()
    booking = await make_booking(ride, "completed")

    response = await client.post(REVIEWS_URL, json=_body(booking.id), headers=passenger_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "You cannot review a trip that hasn't happened yet"


@pytest.mark.asyncio
async def test_one_review_per_trip(client: AsyncClient, db_session, passenger_headers, driver_headers, completed_trip):
    booking = await completed_trip()
    booking_id = booking.id

    first = await client.post(REVIEWS_URL, json=_body(booking_id), headers=passenger_headers)
    assert first.status_code == 201

    again = await client.post(REVIEWS_URL, json=_body(booking_id, rating=1), headers=passenger_headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "You have already reviewed this trip"

    # The other participant still gets their own review
    other = await client.post(REVIEWS_URL, json=_body(booking_id), headers=driver_headers)
    assert other.status_code == 201

    result = await db_session.execute(select(Review).where(Review.booking_id == booking_id))
    assert len(result.scalars().all()) == 2


@pytest.mark.asyncio
async def test_list_reviews(client: AsyncClient, passenger_headers, driver_headers, driver, passenger, completed_trip):
    booking = await completed_trip()
    booking_id = booking.id
    driver_id, passenger_id = str(driver.id), str(passenger.id)

    await client.post(REVIEWS_URL, json=_body(booking_id, rating=4), headers=passenger_headers)
    await client.post(REVIEWS_URL, json=_body(booking_id, rating=5), headers=driver_headers)

    everything = await client.get(REVIEWS_URL, headers=passenger_headers)
    assert everything.status_code == 200
    assert len(everything.json()) == 2

    about_driver = await client.get(REVIEWS_URL, params={"user_id": driver_id}, headers=passenger_headers)
    assert [r["rating"] for r in about_driver.json()] == [4]
    assert about_driver.json()[0]["reviewee_id"] == driver_id

    about_passenger = await client.get(REVIEWS_URL, params={"user_id": passenger_id}, headers=passenger_headers)
    assert [r["rating"] for r in about_passenger.json()] == [5]

    page = await client.get(REVIEWS_URL, params={"limit": 1, "offset": 1}, headers=passenger_headers)
    assert len(page.json()) == 1


@pytest.mark.asyncio
async def test_list_reviews_requires_auth(client: AsyncClient):
    response = await client.get(REVIEWS_URL)
    assert response.status_code == 401
