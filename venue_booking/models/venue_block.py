from sqlalchemy import Column, String, DateTime, Date, Time, Text, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from venue_booking.core.database import Base


class BlockType(str, enum.Enum):
    MAINTENANCE = "maintenance"
    EVENT = "event"
    HOLIDAY = "holiday"
    EMERGENCY = "emergency"
    OTHER = "other"


class VenueBlock(Base):
    """
    A window during which an admin has taken one venue out of booking.
    A block holds its slot until it is deleted.
    """
    __tablename__ = "venue_blocks"
    
    id = Column(String(36), primary_key=True, index=True)
    
    venue_id = Column(String(36), ForeignKey("venues.id"), nullable=False, index=True)
    
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
    from_time = Column(Time, nullable=False)
    to_time = Column(Time, nullable=False)
    
    block_type = Column(SQLEnum(BlockType), nullable=False, default=BlockType.OTHER)
    reason = Column(Text, nullable=True)
    created_by = Column(String(36), nullable=True)
    
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )
    
    venue = relationship("Venue")
    
    __table_args__ = (
        Index("ix_venue_blocks_venue_dates", "venue_id", "from_date", "to_date"),
    )
    
    def __repr__(self) -> str:
        return f"<VenueBlock(id={self.id}, venue_id={self.venue_id}, type={self.block_type})>"
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "venueId": self.venue_id,
            "fromDate": self.from_date.isoformat(),
            "toDate": self.to_date.isoformat(),
            "fromTime": self.from_time.strftime("%H:%M"),
            "toTime": self.to_time.strftime("%H:%M"),
            "blockType": self.block_type.value,
            "reason": self.reason,
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
