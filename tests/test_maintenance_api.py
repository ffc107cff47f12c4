from datetime import date, time

import pytest

from court_reservations.models.reservation import STATUS_CANCELLED, STATUS_CONFIRMED
from helpers import ADMIN_ID, OTHER_ID, OWNER_ID, headers_for

ADMIN = headers_for(ADMIN_ID)


def maintenance_payload(court_id, start_date="2025-06-10", end_date="2025-06-10", start="08:00", end="11:00", **extra):
    payload = {
        "courtId": court_id,
        "startDate": start_date,
        "endDate": end_date,
        "startTime": start,
        "endTime": end,
        "type": "maintenance",
    }
    payload.update(extra)
    return payload


@pytest.mark.asyncio
async def test_maintenance_cancels_only_overlapping_reservations(
    client, seed, emails, add_reservation, reservation_status
):
    morning = await add_reservation(time(9, 0), time(10, 0))
    afternoon = await add_reservation(time(14, 0), time(15, 0))

    response = await client.post("/admin/maintenance", json=maintenance_payload(seed["court"]), headers=ADMIN)

    assert response.status_code == 201
    body = response.json()
    assert body["cancelledReservations"] == 1
    assert body["startTime"] == "08:00"
    assert body["id"]
    assert await reservation_status(morning) == STATUS_CANCELLED
    assert await reservation_status(afternoon) == STATUS_CONFIRMED
    assert len(emails.sent) == 1
    assert "facility maintenance work" in emails.sent[0]["html"]


@pytest.mark.asyncio
async def test_maintenance_spans_every_day_in_range(client, seed, add_reservation, reservation_status):
    first = await add_reservation(time(12, 0), time(13, 0), on=date(2025, 11, 30))
    middle = await add_reservation(time(18, 0), time(20, 0), on=date(2025, 12, 15), user_id=OTHER_ID)
    outside = await add_reservation(time(12, 0), time(13, 0), on=date(2026, 3, 1))
    other_court = await add_reservation(
        time(12, 0), time(13, 0), on=date(2025, 12, 15), court_id=seed["side_court"]
    )

    response = await client.post(
        "/admin/maintenance",
        json=maintenance_payload(
            seed["court"], "2025-11-30", "2026-02-28", "08:00", "22:00", type="winter_season"
        ),
        headers=ADMIN,
    )

    assert response.json()["cancelledReservations"] == 2
    assert await reservation_status(first) == STATUS_CANCELLED
    assert await reservation_status(middle) == STATUS_CANCELLED
    assert await reservation_status(outside) == STATUS_CONFIRMED
    assert await reservation_status(other_court) == STATUS_CONFIRMED


@pytest.mark.asyncio
async def test_winter_season_reason(client, seed, emails, add_reservation):
    await add_reservation(time(9, 0), time(10, 0))

    await client.post(
        "/admin/maintenance",
        json=maintenance_payload(seed["court"], type="winter_season"),
        headers=ADMIN,
    )

    assert "winter season closure" in emails.sent[0]["html"]


@pytest.mark.asyncio
async def test_one_failed_email_does_not_stop_the_cascade(
    client, seed, emails, add_reservation, reservation_status
):
    emails.failing_recipients.add("owner@example.com")
    owners = await add_reservation(time(8, 0), time(9, 0), user_id=OWNER_ID)
    others = await add_reservation(time(9, 0), time(10, 0), user_id=OTHER_ID)

    response = await client.post("/admin/maintenance", json=maintenance_payload(seed["court"]), headers=ADMIN)

    assert response.json()["cancelledReservations"] == 2
    assert await reservation_status(owners) == STATUS_CANCELLED
    assert await reservation_status(others) == STATUS_CANCELLED
    assert [message["to"] for message in emails.sent] == ["other@example.com"]


@pytest.mark.asyncio
async def test_touching_reservations_survive(client, seed, add_reservation, reservation_status):
    before = await add_reservation(time(7, 0), time(8, 0))
    after = await add_reservation(time(11, 0), time(12, 0))

    response = await client.post("/admin/maintenance", json=maintenance_payload(seed["court"]), headers=ADMIN)

    assert response.json()["cancelledReservations"] == 0
    assert await reservation_status(before) == STATUS_CONFIRMED
    assert await reservation_status(after) == STATUS_CONFIRMED


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"type": "holiday"},
        {"startDate": "2025-06-11", "endDate": "2025-06-10"},
        {"startTime": "11:00", "endTime": "08:00"},
    ],
)
async def test_invalid_maintenance_is_rejected(client, seed, overrides):
    payload = {**maintenance_payload(seed["court"]), **overrides}

    response = await client.post("/admin/maintenance", json=payload, headers=ADMIN)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_maintenance_for_unknown_court(client):
    response = await client.post("/admin/maintenance", json=maintenance_payload(999), headers=ADMIN)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_users_cannot_create_maintenance(client, seed):
    response = await client.post(
        "/admin/maintenance", json=maintenance_payload(seed["court"]), headers=headers_for(OWNER_ID)
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_does_not_restore_cancelled_reservations(
    client, seed, add_reservation, reservation_status
):
    reservation_id = await add_reservation(time(9, 0), time(10, 0))
    created = await client.post("/admin/maintenance", json=maintenance_payload(seed["court"]), headers=ADMIN)
    period_id = created.json()["id"]

    deleted = await client.delete(f"/admin/maintenance/{period_id}", headers=ADMIN)

    assert deleted.status_code == 204
    assert await reservation_status(reservation_id) == STATUS_CANCELLED
    assert (await client.get(f"/admin/maintenance/{period_id}", headers=ADMIN)).status_code == 404
    availability = await client.get(
        f"/courts/{seed['court']}/availability", params={"date": "2025-06-10"}
    )
    assert availability.json() == []


@pytest.mark.asyncio
async def test_update_does_not_cascade(client, seed, add_reservation, reservation_status):
    created = await client.post("/admin/maintenance", json=maintenance_payload(seed["court"]), headers=ADMIN)
    reservation_id = await add_reservation(time(14, 0), time(15, 0))

    response = await client.patch(
        f"/admin/maintenance/{created.json()['id']}",
        json={"endTime": "16:00", "description": "Resurfacing"},
        headers=ADMIN,
    )

    assert response.status_code == 200
    assert response.json()["endTime"] == "16:00"
    assert response.json()["description"] == "Resurfacing"
    assert await reservation_status(reservation_id) == STATUS_CONFIRMED


@pytest.mark.asyncio
async def test_list_maintenance_periods(client, seed):
    await client.post("/admin/maintenance", json=maintenance_payload(seed["court"]), headers=ADMIN)
    await client.post(
        "/admin/maintenance",
        json=maintenance_payload(seed["side_court"], "2025-07-01", "2025-07-31"),
        headers=ADMIN,
    )

    by_court = await client.get("/admin/maintenance", params={"courtId": seed["court"]}, headers=ADMIN)
    by_date = await client.get("/admin/maintenance", params={"date": "2025-07-15"}, headers=ADMIN)

    assert [period["courtId"] for period in by_court.json()] == [seed["court"]]
    assert [period["courtId"] for period in by_date.json()] == [seed["side_court"]]
