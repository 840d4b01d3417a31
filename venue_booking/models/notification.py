from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from venue_booking.core.database import Base


class NotificationType(str, enum.Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_APPROVED = "booking_approved"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_MODIFIED = "booking_modified"


class BookingNotification(Base):
    """
    In-app notification delivered to the club that owns a booking.
    """
    __tablename__ = "booking_notifications"
    
    id = Column(String(36), primary_key=True, index=True)
    
    recipient_id = Column(String(36), nullable=False, index=True, comment="Club ID of the recipient")
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=True, index=True)
    venue_id = Column(String(36), ForeignKey("venues.id"), nullable=False)
    
    notification_type = Column(SQLEnum(NotificationType), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    read_at = Column(DateTime(timezone=True), nullable=True)
    
    booking = relationship("Booking")
    
    def __repr__(self) -> str:
        return f"<BookingNotification(id={self.id}, recipient_id={self.recipient_id}, type={self.notification_type})>"
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "recipientId": self.recipient_id,
            "bookingId": self.booking_id,
            "venueId": self.venue_id,
            "type": self.notification_type.value,
            "message": self.message,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "readAt": self.read_at.isoformat() if self.read_at else None,
        }
