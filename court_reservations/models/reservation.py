"""Reservation model."""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Date, Time, Numeric, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from court_reservations.core.database import Base

STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
# Accepted by the column but never produced by any booking flow.
STATUS_PENDING = "pending"


class Reservation(Base):
    """A booked range of slots on one court and one facility-local date."""

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    court_id = Column(Integer, ForeignKey("courts.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # facility-local calendar day
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default=STATUS_CONFIRMED)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="reservations", lazy="joined")
    court = relationship("Court", back_populates="reservations", lazy="joined")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_reservations_time_order"),
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'pending')",
            name="ck_reservations_status",
        ),
        Index("ix_reservations_court_date_status", "court_id", "date", "status"),
    )
