from typing import Optional, List, Tuple
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from datetime import date, time
from venue_booking.models.booking import Booking, BookingStatus, LIVE_STATUSES
from venue_booking.models.venue import Venue, VenueType
from venue_booking.utils.availability import campus_now
import uuid


class BookingRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, booking_id: str, include_relations: bool = True) -> Optional[Booking]:
        query = self.db.query(Booking).filter(Booking.id == booking_id)
        if include_relations:
            query = query.options(
                joinedload(Booking.venue),
                joinedload(Booking.club)
            )
        return query.first()
    
    def list_live_for_venue(
        self,
        venue_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None
    ) -> List[Booking]:
        """
        Live (pending/approved) bookings of a venue, optionally narrowed to
        those whose date span touches [from_date, to_date].
        """
        query = self.db.query(Booking).filter(
            Booking.venue_id == venue_id,
            Booking.status.in_(list(LIVE_STATUSES))
        )
        
        if from_date:
            query = query.filter(Booking.to_date >= from_date)
        
        if to_date:
            query = query.filter(Booking.from_date <= to_date)
        
        return query.order_by(Booking.from_date, Booking.from_time).all()
    
    def get_by_venue(
        self,
        venue_id: str,
        status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        query = self.db.query(Booking).filter(Booking.venue_id == venue_id)
        
        if status:
            query = query.filter(Booking.status == status)
        
        return query.options(joinedload(Booking.club)).order_by(
            Booking.from_date, Booking.from_time
        ).all()
    
    def get_by_club(
        self,
        club_id: str,
        status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        query = self.db.query(Booking).filter(Booking.club_id == club_id)
        
        if status:
            query = query.filter(Booking.status == status)
        
        return query.options(joinedload(Booking.venue)).order_by(Booking.created_at.desc()).all()
    
    def get_all(
        self,
        venue_id: Optional[str] = None,
        venue_type: Optional[VenueType] = None,
        status: Optional[BookingStatus] = None,
        department: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Booking], int]:
        query = self.db.query(Booking)
        
        if venue_id:
            query = query.filter(Booking.venue_id == venue_id)
        
        if venue_type:
            query = query.join(Venue, Booking.venue_id == Venue.id).filter(Venue.venue_type == venue_type)
        
        if status:
            query = query.filter(Booking.status == status)
        
        if department:
            query = query.filter(Booking.department.ilike(f"%{department}%"))
        
        if from_date:
            query = query.filter(Booking.from_date >= from_date)
        
        if to_date:
            query = query.filter(Booking.from_date <= to_date)
        
        total_count = query.count()
        
        offset = (page - 1) * limit
        bookings = query.options(
            joinedload(Booking.venue),
            joinedload(Booking.club)
        ).order_by(Booking.created_at.desc()).offset(offset).limit(limit).all()
        
        return bookings, total_count
    
    def create(
        self,
        venue_id: str,
        club_id: str,
        event_name: str,
        faculty_in_charge: str,
        department: str,
        mobile_number: str,
        participants: int,
        from_date: date,
        to_date: date,
        from_time: time,
        to_time: time,
        event_type: Optional[str] = None,
        logistics: Optional[List[str]] = None,
        notes: Optional[str] = None
    ) -> Booking:
        booking_id = str(uuid.uuid4())
        
        booking = Booking(
            id=booking_id,
            venue_id=venue_id,
            club_id=club_id,
            event_name=event_name,
            event_type=event_type,
            faculty_in_charge=faculty_in_charge,
            department=department,
            mobile_number=mobile_number,
            participants=participants,
            logistics=logistics if logistics else [],
            notes=notes,
            from_date=from_date,
            to_date=to_date,
            from_time=from_time,
            to_time=to_time,
            status=BookingStatus.PENDING
        )
        
        try:
            self.db.add(booking)
            self.db.commit()
            self.db.refresh(booking)
            return booking
        except IntegrityError:
            self.db.rollback()
            raise
    
    def update(self, booking: Booking, **kwargs) -> Booking:
        for key, value in kwargs.items():
            if hasattr(booking, key) and key not in ['id', 'status', 'venue_id', 'club_id']:
                setattr(booking, key, value)
        
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(booking)
        return booking
    
    def set_status(
        self,
        booking: Booking,
        status: BookingStatus,
        reviewed_by: Optional[str] = None,
        rejection_reason: Optional[str] = None
    ) -> Booking:
        booking.status = status
        if reviewed_by:
            booking.reviewed_by = reviewed_by
            booking.reviewed_at = campus_now()
        if status == BookingStatus.REJECTED:
            booking.rejection_reason = rejection_reason
        self.db.commit()
        self.db.refresh(booking)
        return booking
    
    def delete(self, booking: Booking) -> None:
        self.db.delete(booking)
        self.db.commit()
    
    def get_statistics(
        self,
        venue_type: Optional[VenueType] = None,
        department: Optional[str] = None
    ) -> dict:
        query = self.db.query(
            Booking.status,
            func.count(Booking.id),
            func.coalesce(func.sum(Booking.participants), 0)
        )
        
        if venue_type:
            query = query.join(Venue, Booking.venue_id == Venue.id).filter(Venue.venue_type == venue_type)
        
        if department:
            query = query.filter(Booking.department == department)
        
        rows = query.group_by(Booking.status).all()
        
        by_status = {status.value: {"count": 0, "participants": 0} for status in BookingStatus}
        for status, count, participants in rows:
            by_status[status.value] = {"count": count, "participants": int(participants)}
        
        return {
            "total": sum(entry["count"] for entry in by_status.values()),
            "totalParticipants": sum(entry["participants"] for entry in by_status.values()),
            "byStatus": by_status
        }
