"""Reservation e-mail notifications.

Delivery is best-effort: a failed message is logged and never propagates
back into the booking operation that triggered it.
"""
import logging
from dataclasses import dataclass
from datetime import date, time as dt_time
from decimal import Decimal
from typing import Optional

from court_reservations.core.config import settings
from court_reservations.models.reservation import Reservation
from court_reservations.services.email_client import email_client
from court_reservations.services.slot_grid import format_time

logger = logging.getLogger(__name__)

REASON_USER = "user decision"
REASON_ADMIN = "administrator decision"
REASON_MAINTENANCE = "facility maintenance work"
REASON_WINTER_SEASON = "winter season closure"

KIND_CONFIRMATION = "confirmation"
KIND_UPDATE = "update"
KIND_CANCELLATION = "cancellation"


@dataclass(frozen=True)
class ReservationNotice:
    """Detached snapshot of a reservation, safe to use after the session closes."""

    reservation_id: int
    email: str
    first_name: Optional[str]
    court_name: str
    date: date
    start_time: dt_time
    end_time: dt_time
    total_price: Decimal

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationNotice":
        return cls(
            reservation_id=reservation.id,
            email=reservation.user.email,
            first_name=reservation.user.first_name,
            court_name=reservation.court.name,
            date=reservation.date,
            start_time=reservation.start_time,
            end_time=reservation.end_time,
            total_price=reservation.total_price,
        )

    @property
    def time_range(self) -> str:
        return f"{format_time(self.start_time)}-{format_time(self.end_time)}"


_DETAILS = """
  <div style="background: {background}; padding: 15px; border-radius: 5px; margin: 20px 0;">
    <strong>{heading}</strong><br>
    Date: {date}<br>
    Time: {time_range}<br>
    Court: {court}{price}
  </div>
"""


def _details(notice: ReservationNotice, heading: str, background: str, with_price: bool = True) -> str:
    return _DETAILS.format(
        background=background,
        heading=heading,
        date=notice.date.strftime("%Y-%m-%d (%A)"),
        time_range=notice.time_range,
        court=notice.court_name,
        price=f"<br>\n    Price: {notice.total_price} EUR" if with_price else "",
    )


class NotificationService:
    """Builds and sends reservation e-mails."""

    def __init__(self, client=None):
        self.client = client or email_client

    def _signature(self) -> str:
        return f"<p>See you on court,<br>{settings.FACILITY_NAME}</p>"

    async def send_reservation_confirmation(self, notice: ReservationNotice) -> None:
        subject = f"Court reservation confirmed - {settings.FACILITY_NAME}"
        html = (
            "<h2>Reservation confirmed!</h2>"
            f"<p>Hello {notice.first_name or ''}!</p>"
            "<p>Your court reservation has been confirmed:</p>"
            + _details(notice, "Reservation details:", "#f5f5f5")
            + "<p>If you have any questions, please contact us.</p>"
            + self._signature()
        )
        await self.client.send_email(notice.email, subject, html)

    async def send_reservation_update(self, notice: ReservationNotice) -> None:
        subject = f"Reservation changed - {settings.FACILITY_NAME}"
        html = (
            "<h2>Reservation changed</h2>"
            f"<p>Hello {notice.first_name or ''}!</p>"
            "<p>Your court reservation has been changed:</p>"
            + _details(notice, "Updated reservation details:", "#fff3cd")
            + "<p>If you did not make this change, please contact us immediately.</p>"
            + self._signature()
        )
        await self.client.send_email(notice.email, subject, html)

    async def send_reservation_cancellation(self, notice: ReservationNotice, reason: str = REASON_ADMIN) -> None:
        subject = f"Reservation cancelled - {settings.FACILITY_NAME}"
        html = (
            "<h2>Reservation cancelled</h2>"
            f"<p>Hello {notice.first_name or ''}!</p>"
            f"<p>Your court reservation has been cancelled due to: <strong>{reason}</strong></p>"
            + _details(notice, "Cancelled reservation:", "#f8d7da", with_price=False)
            + "<p>We apologise for the inconvenience.</p>"
            + self._signature()
        )
        await self.client.send_email(notice.email, subject, html)

    async def deliver(self, kind: str, notice: ReservationNotice, reason: Optional[str] = None) -> bool:
        """
        Send one notification without letting failures escape.

        Args:
            kind: confirmation, update or cancellation
            notice: Reservation snapshot
            reason: Cancellation reason shown to the user

        Returns:
            True if the message was handed to the e-mail client
        """
        if kind not in (KIND_CONFIRMATION, KIND_UPDATE, KIND_CANCELLATION):
            raise ValueError(f"Unknown notification kind '{kind}'")

        try:
            if kind == KIND_CONFIRMATION:
                await self.send_reservation_confirmation(notice)
            elif kind == KIND_UPDATE:
                await self.send_reservation_update(notice)
            else:
                await self.send_reservation_cancellation(notice, reason or REASON_ADMIN)
            return True
        except Exception as e:
            logger.warning(
                f"Failed to send {kind} e-mail for reservation {notice.reservation_id}: {e}",
                exc_info=True,
            )
            return False


# Singleton instance
notification_service = NotificationService()
