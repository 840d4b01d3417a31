from typing import Optional, List
from sqlalchemy.orm import Session
from venue_booking.models.booking import Booking
from venue_booking.models.notification import BookingNotification, NotificationType
from venue_booking.utils.availability import campus_now
import uuid


class NotificationRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, notification_id: str) -> Optional[BookingNotification]:
        return self.db.query(BookingNotification).filter(
            BookingNotification.id == notification_id
        ).first()
    
    def get_for_recipient(
        self,
        recipient_id: str,
        unread_only: bool = False
    ) -> List[BookingNotification]:
        query = self.db.query(BookingNotification).filter(
            BookingNotification.recipient_id == recipient_id
        )
        if unread_only:
            query = query.filter(BookingNotification.is_read == False)
        return query.order_by(BookingNotification.created_at.desc()).all()
    
    def create_for_booking(
        self,
        booking: Booking,
        notification_type: NotificationType,
        message: str
    ) -> BookingNotification:
        notification = BookingNotification(
            id=str(uuid.uuid4()),
            recipient_id=booking.club_id,
            booking_id=booking.id,
            venue_id=booking.venue_id,
            notification_type=notification_type,
            message=message,
            is_read=False
        )
        
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        return notification
    
    def mark_read(self, notification: BookingNotification) -> BookingNotification:
        notification.is_read = True
        notification.read_at = campus_now()
        self.db.commit()
        self.db.refresh(notification)
        return notification
    
    def delete_for_booking(self, booking_id: str) -> int:
        count = self.db.query(BookingNotification).filter(
            BookingNotification.booking_id == booking_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return count
