from sqlalchemy import Column, String, DateTime, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
import enum
from venue_booking.core.database import Base


class AuditAction(str, enum.Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_UPDATED = "booking_updated"
    BOOKING_APPROVED = "booking_approved"
    BOOKING_REJECTED = "booking_rejected"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_DELETED = "booking_deleted"
    VENUE_CREATED = "venue_created"
    VENUE_UPDATED = "venue_updated"
    VENUE_MAINTENANCE = "venue_maintenance"
    VENUE_BLOCKED = "venue_blocked"
    VENUE_UNBLOCKED = "venue_unblocked"
    CLUB_CREATED = "club_created"
    CLUB_UPDATED = "club_updated"
    CLUB_DEACTIVATED = "club_deactivated"


class TargetType(str, enum.Enum):
    BOOKING = "booking"
    VENUE = "venue"
    CLUB = "club"


class AuditLog(Base):
    __tablename__ = "audit_logs"
    
    id = Column(String(36), primary_key=True, index=True)
    
    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True
    )
    action = Column(SQLEnum(AuditAction), nullable=False, index=True)
    
    actor_id = Column(String(36), nullable=True, index=True)
    actor_name = Column(String(200), nullable=True)
    actor_role = Column(String(20), nullable=True)
    
    target_type = Column(SQLEnum(TargetType), nullable=True)
    target_id = Column(String(36), nullable=True, index=True)
    target_name = Column(String(200), nullable=True)
    
    details = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", JSON, nullable=True)
    
    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, action={self.action}, target_id={self.target_id})>"
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "action": self.action.value,
            "actor": {
                "id": self.actor_id,
                "name": self.actor_name,
                "role": self.actor_role,
            },
            "target": {
                "type": self.target_type.value if self.target_type else None,
                "id": self.target_id,
                "name": self.target_name,
            },
            "details": self.details,
            "metadata": self.extra_metadata or {},
        }
