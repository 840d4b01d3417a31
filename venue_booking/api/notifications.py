from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from venue_booking.api.deps import get_actor
from venue_booking.core.actor import Actor
from venue_booking.core.database import get_db
from venue_booking.schemas.notification import NotificationsResponse
from venue_booking.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationsResponse)
def list_notifications(
    unreadOnly: bool = False,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    notifications = NotificationService(db).list_for_actor(actor, unread_only=unreadOnly)
    return {
        "success": True,
        "notifications": [notification.to_dict() for notification in notifications],
        "unreadCount": sum(1 for notification in notifications if not notification.is_read)
    }


@router.put("/{notification_id}/read")
def mark_notification_read(
    notification_id: str,
    actor: Actor = Depends(get_actor),
    db: Session = Depends(get_db)
) -> dict:
    notification = NotificationService(db).mark_read(actor, notification_id)
    return {"success": True, "notification": notification.to_dict()}
