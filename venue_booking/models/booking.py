from sqlalchemy import Column, String, DateTime, Date, Time, Integer, Text, JSON, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from venue_booking.core.database import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# Only live bookings hold their slot on the venue calendar.
LIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.APPROVED})

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED}),
    BookingStatus.APPROVED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


class Booking(Base):
    __tablename__ = "bookings"
    
    id = Column(String(36), primary_key=True, index=True)
    
    venue_id = Column(String(36), ForeignKey("venues.id"), nullable=False, index=True)
    club_id = Column(String(36), ForeignKey("clubs.id"), nullable=False, index=True)
    
    event_name = Column(String(200), nullable=False)
    event_type = Column(String(50), nullable=True)
    faculty_in_charge = Column(String(200), nullable=False)
    department = Column(String(100), nullable=False)
    mobile_number = Column(String(10), nullable=False)
    participants = Column(Integer, nullable=False)
    logistics = Column(JSON, nullable=True, comment="Requested logistics (e.g., ['Mic', 'Projector'])")
    notes = Column(Text, nullable=True)
    
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
    from_time = Column(Time, nullable=False)
    to_time = Column(Time, nullable=False)
    
    status = Column(
        SQLEnum(BookingStatus),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True
    )
    reviewed_by = Column(String(36), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    
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
    
    venue = relationship("Venue", back_populates="bookings")
    club = relationship("Club", back_populates="bookings")
    
    __table_args__ = (
        Index("ix_bookings_venue_dates", "venue_id", "from_date", "to_date"),
    )
    
    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, venue_id={self.venue_id}, status={self.status})>"
    
    def to_dict(self, include_venue: bool = False, include_club: bool = False) -> dict:
        booking_dict = {
            "id": self.id,
            "venueId": self.venue_id,
            "clubId": self.club_id,
            "eventName": self.event_name,
            "eventType": self.event_type,
            "facultyInCharge": self.faculty_in_charge,
            "department": self.department,
            "mobileNumber": self.mobile_number,
            "participants": self.participants,
            "logistics": self.logistics if self.logistics else [],
            "notes": self.notes,
            "fromDate": self.from_date.isoformat(),
            "toDate": self.to_date.isoformat(),
            "fromTime": self.from_time.strftime("%H:%M"),
            "toTime": self.to_time.strftime("%H:%M"),
            "status": self.status.value,
            "reviewedBy": self.reviewed_by,
            "reviewedAt": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "rejectionReason": self.rejection_reason,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        
        if include_venue and self.venue:
            booking_dict["venue"] = {
                "id": self.venue.id,
                "name": self.venue.name,
                "venueType": self.venue.venue_type.value,
                "location": self.venue.location,
            }
        
        if include_club and self.club:
            booking_dict["club"] = {
                "id": self.club.id,
                "name": self.club.name,
                "department": self.club.department,
            }
        
        return booking_dict
