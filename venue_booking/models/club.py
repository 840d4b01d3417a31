from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from venue_booking.core.database import Base


class Club(Base):
    """
    Student club or department body that requests venue bookings.
    """
    __tablename__ = "clubs"
    
    id = Column(String(36), primary_key=True, index=True)
    
    name = Column(String(200), nullable=False, unique=True)
    department = Column(String(100), nullable=False, index=True)
    faculty_coordinator = Column(String(200), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    
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
    
    bookings = relationship("Booking", back_populates="club", lazy="dynamic")
    
    def __repr__(self) -> str:
        return f"<Club(id={self.id}, name={self.name})>"
    
    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "facultyCoordinator": self.faculty_coordinator,
            "contactEmail": self.contact_email,
            "contactPhone": self.contact_phone,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
