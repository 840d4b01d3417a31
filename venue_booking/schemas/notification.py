from pydantic import BaseModel
from typing import Optional, List


class NotificationResponse(BaseModel):
    id: str
    recipientId: str
    bookingId: Optional[str] = None
    venueId: str
    type: str
    message: str
    isRead: bool
    createdAt: Optional[str] = None
    readAt: Optional[str] = None
    
    class Config:
        from_attributes = True


class NotificationsResponse(BaseModel):
    success: bool = True
    notifications: List[NotificationResponse]
    unreadCount: int
