from sqlalchemy import Column, String, Boolean, DateTime, Integer, JSON, Time, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from venue_booking.core.database import Base


class VenueType(str, enum.Enum):
    COMPUTER_CENTER = "cc"
    SEMINAR_HALL = "seminar"
    MAHARAJA_HALL = "maharaja"
    CONVENTION_CENTER = "convention"
    OTHER = "other"


class Venue(Base):
    """
    A bookable campus resource (lab, seminar hall, auditorium).
    Venues are never hard-deleted; maintenance mode takes them out of service.
    """
    __tablename__ = "venues"
    
    id = Column(String(36), primary_key=True, index=True)
    
    name = Column(String(200), nullable=False, index=True)
    venue_type = Column(SQLEnum(VenueType), nullable=False, index=True)
    department = Column(String(100), nullable=False, index=True)
    location = Column(String(300), nullable=True)
    capacity = Column(Integer, nullable=False, comment="Maximum number of participants")
    
    faculty_in_charge = Column(String(200), nullable=True)
    faculty_contact = Column(String(20), nullable=True)
    
    features = Column(
        JSON,
        nullable=True,
        comment="Array of available features (e.g., ['Projector', 'Mic', 'AC'])"
    )
    
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    maintenance_reason = Column(Text, nullable=True)
    
    # Booking rules
    max_advance_booking_days = Column(Integer, nullable=True, default=90)
    min_advance_booking_hours = Column(Integer, nullable=True, default=24)
    max_booking_duration_hours = Column(Integer, nullable=True)
    allow_weekend_bookings = Column(Boolean, nullable=False, default=True)
    opens_at = Column(Time, nullable=True)
    closes_at = Column(Time, nullable=True)
    
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )
    
    bookings = relationship("Booking", back_populates="venue", lazy="dynamic")
    
    @property
    def is_bookable(self) -> bool:
        return bool(self.is_active) and not self.maintenance_mode
    
    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name={self.name}, type={self.venue_type})>"
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "venueType": self.venue_type.value,
            "department": self.department,
            "location": self.location,
            "capacity": self.capacity,
            "facultyInCharge": self.faculty_in_charge,
            "facultyContact": self.faculty_contact,
            "features": self.features if self.features else [],
            "isActive": self.is_active,
            "maintenanceMode": self.maintenance_mode,
            "maintenanceReason": self.maintenance_reason,
            "bookingRules": {
                "maxAdvanceBookingDays": self.max_advance_booking_days,
                "minAdvanceBookingHours": self.min_advance_booking_hours,
                "maxBookingDurationHours": self.max_booking_duration_hours,
                "allowWeekendBookings": self.allow_weekend_bookings,
                "opensAt": self.opens_at.strftime("%H:%M") if self.opens_at else None,
                "closesAt": self.closes_at.strftime("%H:%M") if self.closes_at else None,
            },
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
