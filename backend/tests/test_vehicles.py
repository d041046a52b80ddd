"""
Tests for member vehicles.
"""

import uuid
from datetime import date

import pytest
from httpx import AsyncClient

VEHICLES_URL = "/api/v1/vehicles/"


def _vehicle_body(**overrides) -> dict:
    body = {
        "make": "Subaru",
        "model": "Outback",
        "year": 2019,
        "color": "Forest Green",
        "license_plate": "ABC-123",
        "drivetrain": "AWD",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_add_and_list_vehicles(client: AsyncClient, driver_headers, passenger_headers, driver):
    response = await client.post(VEHICLES_URL, json=_vehicle_body(), headers=driver_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["owner_id"] == str(driver.id)
    assert data["drivetrain"] == "AWD"
    assert data["license_plate"] == "ABC-123"

    mine = await client.get(VEHICLES_URL, headers=driver_headers)
    assert [v["model"] for v in mine.json()] == ["Outback"]

    # Vehicles are private to their owner
    theirs = await client.get(VEHICLES_URL, headers=passenger_headers)
    assert theirs.json() == []


@pytest.mark.asyncio
async def test_plate_is_optional(client: AsyncClient, driver_headers):
    body = _vehicle_body()
    del body["license_plate"]
    response = await client.post(VEHICLES_URL, json=body, headers=driver_headers)
    assert response.status_code == 201
    assert response.json()["license_plate"] is None

    empty = await client.post(VEHICLES_URL, json=_vehicle_body(license_plate=""), headers=driver_headers)
    assert empty.status_code == 201


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"make": ""},
        {"model": "Outback!"},
        {"color": "x" * 51},
        {"year": 1899},
        {"year": date.today().year + 2},
        {"license_plate": "ABC_123"},
        {"license_plate": "A" * 21},
        {"drivetrain": "2WD"},
    ],
)
async def test_vehicle_validation(client: AsyncClient, driver_headers, overrides):
    response = await client.post(VEHICLES_URL, json=_vehicle_body(**overrides), headers=driver_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_next_model_year_is_allowed(client: AsyncClient, driver_headers):
    response = await client.post(VEHICLES_URL, json=_vehicle_body(year=date.today().year + 1), headers=driver_headers)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_add_vehicle_requires_profile(client: AsyncClient, auth_headers_for):
    response = await client.post(VEHICLES_URL, json=_vehicle_body(), headers=auth_headers_for(uuid.uuid4()))
    assert response.status_code == 403
    assert response.json()["detail"] == "You must complete your profile before adding vehicles"
