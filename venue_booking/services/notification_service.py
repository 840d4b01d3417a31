from typing import List
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from venue_booking.core.actor import Actor
from venue_booking.models.notification import BookingNotification
from venue_booking.repositories.notification_repository import NotificationRepository


class NotificationService:

    def __init__(self, db: Session):
        self.db = db
        self.notification_repo = NotificationRepository(db)

    def list_for_actor(self, actor: Actor, unread_only: bool = False) -> List[BookingNotification]:
        return self.notification_repo.get_for_recipient(actor.id, unread_only=unread_only)

    def mark_read(self, actor: Actor, notification_id: str) -> BookingNotification:
        notification = self.notification_repo.get_by_id(notification_id)

        if not notification or notification.recipient_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found"
            )

        if notification.is_read:
            return notification

        return self.notification_repo.mark_read(notification)
