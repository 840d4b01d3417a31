from typing import Optional, List, Tuple
from datetime import time
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from venue_booking.models.venue import Venue, VenueType
import uuid


class VenueRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, venue_id: str) -> Optional[Venue]:
        return self.db.query(Venue).filter(Venue.id == venue_id).first()
    
    def get_for_update(self, venue_id: str) -> Optional[Venue]:
        """
        Load a venue and lock its row until the current transaction ends.
        Booking writers for the same venue serialize on this lock.
        """
        return self.db.query(Venue).filter(Venue.id == venue_id).with_for_update().first()
    
    def get_all(
        self,
        department: Optional[str] = None,
        venue_type: Optional[VenueType] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Venue], int]:
        query = self.db.query(Venue)
        
        if department:
            query = query.filter(Venue.department.ilike(f"%{department.strip()}%"))
        
        if venue_type:
            query = query.filter(Venue.venue_type == venue_type)
        
        if is_active is not None:
            query = query.filter(Venue.is_active == is_active)
        
        total_count = query.count()
        
        offset = (page - 1) * limit
        venues = query.order_by(Venue.name).offset(offset).limit(limit).all()
        return venues, total_count
    
    def get_bookable(
        self,
        venue_type: Optional[VenueType] = None,
        min_capacity: Optional[int] = None
    ) -> List[Venue]:
        query = self.db.query(Venue).filter(
            Venue.is_active == True,
            Venue.maintenance_mode == False
        )
        
        if venue_type:
            query = query.filter(Venue.venue_type == venue_type)
        
        if min_capacity:
            query = query.filter(Venue.capacity >= min_capacity)
        
        return query.order_by(Venue.name).all()
    
    def create(
        self,
        name: str,
        venue_type: VenueType,
        department: str,
        capacity: int,
        location: Optional[str] = None,
        faculty_in_charge: Optional[str] = None,
        faculty_contact: Optional[str] = None,
        features: Optional[List[str]] = None,
        max_advance_booking_days: Optional[int] = 90,
        min_advance_booking_hours: Optional[int] = 24,
        max_booking_duration_hours: Optional[int] = None,
        allow_weekend_bookings: bool = True,
        opens_at: Optional[time] = None,
        closes_at: Optional[time] = None
    ) -> Venue:
        venue_id = str(uuid.uuid4())
        
        venue = Venue(
            id=venue_id,
            name=name,
            venue_type=venue_type,
            department=department,
            capacity=capacity,
            location=location,
            faculty_in_charge=faculty_in_charge,
            faculty_contact=faculty_contact,
            features=features if features else [],
            max_advance_booking_days=max_advance_booking_days,
            min_advance_booking_hours=min_advance_booking_hours,
            max_booking_duration_hours=max_booking_duration_hours,
            allow_weekend_bookings=allow_weekend_bookings,
            opens_at=opens_at,
            closes_at=closes_at,
            is_active=True,
            maintenance_mode=False
        )
        
        try:
            self.db.add(venue)
            self.db.commit()
            self.db.refresh(venue)
            return venue
        except IntegrityError:
            self.db.rollback()
            raise
    
    def update(self, venue: Venue, **kwargs) -> Venue:
        for key, value in kwargs.items():
            if hasattr(venue, key) and key != 'id':
                setattr(venue, key, value)
        
        self.db.commit()
        self.db.refresh(venue)
        return venue
    
    def set_maintenance(self, venue: Venue, enabled: bool, reason: Optional[str] = None) -> Venue:
        venue.maintenance_mode = enabled
        venue.maintenance_reason = reason if enabled else None
        venue.is_active = not enabled
        self.db.commit()
        self.db.refresh(venue)
        return venue
