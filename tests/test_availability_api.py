from datetime import date, time
from decimal import Decimal

import pytest

from court_reservations.models.reservation import STATUS_CANCELLED
from helpers import ADMIN_ID, headers_for

DAY = date(2025, 6, 10)


@pytest.mark.asyncio
async def test_list_courts_hides_disabled(client, seed):
    response = await client.get("/courts")

    assert response.status_code == 200
    ids = [court["id"] for court in response.json()]
    assert ids == [seed["court"], seed["side_court"]]
    assert Decimal(str(response.json()[0]["hourlyRate"])) == Decimal("20.00")


@pytest.mark.asyncio
async def test_get_unknown_court(client):
    response = await client.get("/courts/999")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_availability_requires_date(client, seed):
    response = await client.get(f"/courts/{seed['court']}/availability")

    assert response.status_code == 400
    assert response.json()["detail"] == "Date parameter is required"


@pytest.mark.asyncio
async def test_availability_lists_reservations_and_maintenance(client, seed, add_reservation):
    await add_reservation(time(14, 0), time(15, 0), on=DAY)
    await add_reservation(time(10, 0), time(11, 0), on=DAY)
    await add_reservation(time(12, 0), time(13, 0), on=DAY, status=STATUS_CANCELLED)
    await add_reservation(time(10, 0), time(11, 0), on=DAY, court_id=seed["side_court"])

    created = await client.post(
        "/admin/maintenance",
        json={
            "courtId": seed["court"],
            "startDate": "2025-06-01",
            "endDate": "2025-06-30",
            "startTime": "16:00",
            "endTime": "18:00",
            "type": "maintenance",
        },
        headers=headers_for(ADMIN_ID),
    )
    assert created.status_code == 201

    response = await client.get(f"/courts/{seed['court']}/availability", params={"date": "2025-06-10"})

    assert response.status_code == 200
    assert response.json() == [
        {"startTime": "10:00", "endTime": "11:00", "type": "reservation", "maintenanceType": None},
        {"startTime": "14:00", "endTime": "15:00", "type": "reservation", "maintenanceType": None},
        {"startTime": "16:00", "endTime": "18:00", "type": "maintenance", "maintenanceType": "maintenance"},
    ]


@pytest.mark.asyncio
async def test_availability_for_unknown_court_is_empty(client):
    response = await client.get("/courts/999/availability", params={"date": "2025-06-10"})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_slot_grid_flags_reserved_and_past_slots(client, seed, add_reservation):
    await add_reservation(time(9, 0), time(10, 30), on=DAY)

    response = await client.get(f"/courts/{seed['court']}/slots", params={"date": "2025-06-10"})

    assert response.status_code == 200
    grid = response.json()
    assert grid["openingTime"] == "08:00"
    assert grid["closingTime"] == "22:00"
    assert len(grid["slots"]) == 28

    by_start = {slot["startTime"]: slot for slot in grid["slots"]}
    assert not by_start["08:30"]["isReserved"]
    assert by_start["09:00"]["isReserved"]
    assert by_start["10:00"]["isReserved"]
    assert not by_start["10:30"]["isReserved"]
    # 2025-06-10 is behind us, so every slot is in the past
    assert all(slot["isPast"] for slot in grid["slots"])


@pytest.mark.asyncio
async def test_slot_grid_unknown_court(client):
    response = await client.get("/courts/999/slots", params={"date": "2025-06-10"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_public_reservations_hide_user_details(client, seed, add_reservation):
    await add_reservation(time(9, 0), time(10, 0), on=DAY)
    await add_reservation(time(11, 0), time(12, 0), on=DAY, status=STATUS_CANCELLED)

    response = await client.get("/reservations/public", params={"date": "2025-06-10"})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]["startTime"] == "09:00"
    assert body[0]["court"]["name"] == "Court 1"
    assert "user" not in body[0]
    assert "userId" not in body[0]


@pytest.mark.asyncio
async def test_validate_selection_endpoint(client):
    ok = await client.post("/reservations/validate", json={"slots": ["09:30-10:00", "09:00-09:30"]})
    gap = await client.post("/reservations/validate", json={"slots": ["09:00-09:30", "10:00-10:30"]})

    assert ok.json() == {"valid": True, "error": None, "startTime": "09:00", "endTime": "10:00"}
    assert not gap.json()["valid"]
    assert gap.json()["error"]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
