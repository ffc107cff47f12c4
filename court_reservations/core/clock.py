"""Facility-local clock."""
from datetime import date, datetime

import pytz

from court_reservations.core.config import settings


def facility_timezone():
    return pytz.timezone(settings.FACILITY_TIMEZONE)


def facility_now() -> datetime:
    """Current time as an aware datetime in the facility timezone."""
    return datetime.utcnow().replace(tzinfo=pytz.UTC).astimezone(facility_timezone())


def facility_today() -> date:
    return facility_now().date()
