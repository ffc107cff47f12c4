"""Court model."""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from court_reservations.core.database import Base


class Court(Base):
    """Represents a bookable court at the facility."""

    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)  # soft-disable instead of delete
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    reservations = relationship("Reservation", back_populates="court")
    maintenance_periods = relationship("MaintenancePeriod", back_populates="court", cascade="all, delete-orphan")
