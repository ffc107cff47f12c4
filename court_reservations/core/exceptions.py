"""Domain exceptions raised by the reservation services."""


class ReservationError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ReservationError):
    """Malformed or out-of-policy booking input."""

    status_code = 400


class AuthorizationError(ReservationError):
    """Actor may not perform the requested operation."""

    status_code = 403


class NotFoundError(ReservationError):
    """Referenced reservation, court or maintenance period does not exist."""

    status_code = 404


class ConflictError(ReservationError):
    """Proposed range overlaps a confirmed reservation or a maintenance window."""

    status_code = 409


class StorageError(ReservationError):
    """Unexpected persistence failure."""

    status_code = 500


class NotificationError(Exception):
    """E-mail delivery failed. Logged by callers, never returned to clients."""
