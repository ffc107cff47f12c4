"""Capability checks gating reservation mutations."""
from court_reservations.core.exceptions import AuthorizationError
from court_reservations.models.reservation import Reservation
from court_reservations.models.user import User


def is_admin(user: User) -> bool:
    return bool(user is not None and user.is_admin)


def is_owner(user: User, reservation: Reservation) -> bool:
    return user is not None and reservation.user_id == user.id


def ensure_admin(user: User) -> None:
    if not is_admin(user):
        raise AuthorizationError("Admin access required")


def ensure_can_view(user: User, reservation: Reservation) -> None:
    if not (is_owner(user, reservation) or is_admin(user)):
        raise AuthorizationError("Not authorized to view this reservation")


def ensure_can_modify(user: User, reservation: Reservation) -> None:
    """Owner or admin may update or cancel."""
    if not (is_owner(user, reservation) or is_admin(user)):
        raise AuthorizationError("Not authorized to modify this reservation")


def ensure_can_book_for(user: User, owner_id: str) -> None:
    """Only admins may book on behalf of someone else."""
    if owner_id != user.id and not is_admin(user):
        raise AuthorizationError("Not authorized to book for another user")
