"""API schemas."""
from court_reservations.schemas.court import (
    CourtCreate,
    CourtUpdate,
    CourtInDB,
)
from court_reservations.schemas.user import UserPublic
from court_reservations.schemas.reservation import (
    ReservationCreate,
    AdminReservationCreate,
    ReservationUpdate,
    AdminReservationUpdate,
    ReservationInDB,
    ReservationWithDetails,
    PublicReservation,
    SlotSelection,
    SlotSelectionResult,
    MessageResponse,
)
from court_reservations.schemas.maintenance import (
    MaintenancePeriodCreate,
    MaintenancePeriodUpdate,
    MaintenancePeriodInDB,
    MaintenancePeriodCreated,
)
from court_reservations.schemas.availability import (
    AvailabilityEntry,
    TimeSlot,
    SlotGridResponse,
)

__all__ = [
    "CourtCreate",
    "CourtUpdate",
    "CourtInDB",
    "UserPublic",
    "ReservationCreate",
    "AdminReservationCreate",
    "ReservationUpdate",
    "AdminReservationUpdate",
    "ReservationInDB",
    "ReservationWithDetails",
    "PublicReservation",
    "SlotSelection",
    "SlotSelectionResult",
    "MessageResponse",
    "MaintenancePeriodCreate",
    "MaintenancePeriodUpdate",
    "MaintenancePeriodInDB",
    "MaintenancePeriodCreated",
    "AvailabilityEntry",
    "TimeSlot",
    "SlotGridResponse",
]
