"""Shared fakes and utilities for the test suite."""
from datetime import timedelta

from court_reservations.core.clock import facility_today
from court_reservations.core.exceptions import NotificationError

OWNER_ID = "user-owner"
OTHER_ID = "user-other"
ADMIN_ID = "user-admin"


class RecordingEmailClient:
    """Stands in for the e-mail API client and remembers every message."""

    def __init__(self):
        self.sent = []
        self.failing_recipients = set()

    async def send_email(self, to, subject, html):
        if to in self.failing_recipients:
            raise NotificationError(f"Mailbox {to} unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"test-{len(self.sent)}"}

    def subjects_for(self, to):
        return [message["subject"] for message in self.sent if message["to"] == to]


def headers_for(user_id):
    return {"X-User-Id": user_id}


def upcoming_weekday(days_ahead=14):
    """A Monday-to-Friday date comfortably in the future."""
    target = facility_today() + timedelta(days=days_ahead)
    while target.weekday() >= 5:
        target += timedelta(days=1)
    return target


def booking_payload(court_id, on, start="09:00", end="10:00", **extra):
    payload = {"courtId": court_id, "date": on.isoformat(), "startTime": start, "endTime": end}
    payload.update(extra)
    return payload
