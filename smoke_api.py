#!/usr/bin/env python3
"""Smoke test script to verify a running service end to end.

Users are owned by the authentication gateway and there is no API to create
them, so the account named by SMOKE_USER_ID must already exist in the users
table, e.g.:

    INSERT INTO users (id, email, is_admin) VALUES ('player', 'player@example.com', false);
"""

import os
import requests
from datetime import date, timedelta

BASE_URL = "http://localhost:8000"
USER_ID = os.getenv("SMOKE_USER_ID", "player")


def headers(user_id):
    return {"X-User-Id": user_id}


def next_weekday(days_ahead=7):
    target = date.today() + timedelta(days=days_ahead)
    while target.weekday() >= 5:
        target += timedelta(days=1)
    return target


def check_health():
    """Check health endpoint."""
    print("Checking health endpoint...")
    response = requests.get(f"{BASE_URL}/health")
    print(f"  Status: {response.status_code}")
    print(f"  Response: {response.json()}")
    assert response.status_code == 200
    print("  ✓ Health check passed\n")


def check_api_docs():
    """Check that API docs are accessible."""
    print("Checking API documentation...")
    response = requests.get(f"{BASE_URL}/docs")
    print(f"  Status: {response.status_code}")
    assert response.status_code == 200
    print("  ✓ API docs accessible at /docs\n")


def check_user():
    """Check that the smoke user is known to the service."""
    print(f"Checking user '{USER_ID}'...")
    response = requests.get(f"{BASE_URL}/reservations", headers=headers(USER_ID))
    print(f"  Status: {response.status_code}")
    if response.status_code == 401:
        print(f"  User '{USER_ID}' does not exist: insert it into the users table or set SMOKE_USER_ID")
        return False
    assert response.status_code == 200
    print("  ✓ User check passed\n")
    return True


def check_list_courts():
    """List courts open for booking."""
    print("Checking court listing...")
    response = requests.get(f"{BASE_URL}/courts")
    print(f"  Status: {response.status_code}")
    courts = response.json()
    print(f"  Found {len(courts)} court(s)")
    if courts:
        print(f"  First court: {courts[0]['name']} ({courts[0]['hourlyRate']} EUR/h)")
    print("  ✓ Court listing passed\n")
    return courts


def check_slot_grid(court_id, on):
    """Fetch the slot grid for a court."""
    print(f"Checking slot grid for court {court_id} on {on}...")
    response = requests.get(f"{BASE_URL}/courts/{court_id}/slots", params={"date": on.isoformat()})
    print(f"  Status: {response.status_code}")
    grid = response.json()
    free = [slot["startTime"] for slot in grid["slots"] if not (slot["isReserved"] or slot["isMaintenance"])]
    print(f"  {grid['openingTime']}-{grid['closingTime']}, {len(free)}/{len(grid['slots'])} slot(s) free")
    print("  ✓ Slot grid passed\n")
    return free


def check_booking(court_id, on, start_time):
    """Validate a selection, book it, then confirm a duplicate is rejected."""
    print(f"Checking booking at {start_time}...")
    hour, minute = (int(part) for part in start_time.split(":"))
    end_minutes = hour * 60 + minute + 60
    end_time = f"{end_minutes // 60:02d}:{end_minutes % 60:02d}"
    half = f"{(hour * 60 + minute + 30) // 60:02d}:{(hour * 60 + minute + 30) % 60:02d}"

    selection = requests.post(
        f"{BASE_URL}/reservations/validate",
        json={"slots": [f"{start_time}-{half}", f"{half}-{end_time}"]},
    ).json()
    print(f"  Selection valid: {selection['valid']}")

    booking_data = {
        "courtId": court_id,
        "date": on.isoformat(),
        "startTime": start_time,
        "endTime": end_time,
    }
    response = requests.post(f"{BASE_URL}/reservations", json=booking_data, headers=headers(USER_ID))
    print(f"  Status: {response.status_code}")

    if response.status_code != 201:
        print(f"  Error: {response.json()}")
        return None

    reservation = response.json()
    print(f"  Reservation {reservation['id']}: {reservation['totalPrice']} EUR")

    duplicate = requests.post(f"{BASE_URL}/reservations", json=booking_data, headers=headers(USER_ID))
    print(f"  Duplicate booking status: {duplicate.status_code}")
    assert duplicate.status_code == 409
    print("  ✓ Booking passed\n")
    return reservation["id"]


def check_cancel(reservation_id):
    """Cancel the reservation made above."""
    print(f"Checking cancellation of reservation {reservation_id}...")
    response = requests.delete(f"{BASE_URL}/reservations/{reservation_id}", headers=headers(USER_ID))
    print(f"  Status: {response.status_code}")
    print(f"  Response: {response.json()}")
    assert response.status_code == 200
    print("  ✓ Cancellation passed\n")


def main():
    """Run all checks."""
    print("=" * 60)
    print("COURT RESERVATIONS - API SMOKE TEST")
    print("=" * 60)
    print()

    try:
        check_health()
        check_api_docs()

        if not check_user():
            return

        courts = check_list_courts()
        if not courts:
            print("No courts yet: create one with POST /admin/courts first")
            return

        on = next_weekday()
        free = check_slot_grid(courts[0]["id"], on)
        if free:
            reservation_id = check_booking(courts[0]["id"], on, free[0])
            if reservation_id:
                check_cancel(reservation_id)

        print("=" * 60)
        print("ALL CHECKS PASSED! ✓")
        print("=" * 60)
        print()
        print("Open http://localhost:8000/docs to explore the API")
        print()

    except requests.exceptions.ConnectionError:
        print("\n❌ ERROR: Could not connect to the API")
        print("   Make sure the server is running:")
        print("   uvicorn court_reservations.main:app --reload")
        print()
    except AssertionError as e:
        print(f"\n❌ CHECK FAILED: {e}")
        print()


if __name__ == "__main__":
    main()
