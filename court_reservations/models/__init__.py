"""Database models."""
from court_reservations.models.court import Court
from court_reservations.models.user import User
from court_reservations.models.reservation import Reservation
from court_reservations.models.maintenance_period import MaintenancePeriod

__all__ = ["Court", "User", "Reservation", "MaintenancePeriod"]
