"""Maintenance period model."""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Date, Time, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from court_reservations.core.database import Base

TYPE_MAINTENANCE = "maintenance"
TYPE_WINTER_SEASON = "winter_season"

MAINTENANCE_TYPES = (TYPE_MAINTENANCE, TYPE_WINTER_SEASON)


class MaintenancePeriod(Base):
    """Daily blackout window repeated on every day of a date range."""

    __tablename__ = "maintenance_periods"

    id = Column(Integer, primary_key=True, index=True)
    court_id = Column(Integer, ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)  # inclusive
    start_time = Column(Time, nullable=False)  # time of day, applied on each date in range
    end_time = Column(Time, nullable=False)
    type = Column(String, nullable=False, default=TYPE_MAINTENANCE)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    court = relationship("Court", back_populates="maintenance_periods")

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_maintenance_date_order"),
        CheckConstraint("end_time > start_time", name="ck_maintenance_time_order"),
        Index("ix_maintenance_court_dates", "court_id", "start_date", "end_date"),
    )
