from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from shared.security.roles import Role


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    role: Role
    order_id: Optional[str]
    message: str
    read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    notifications: List[NotificationResponse]


class NotificationEvent(BaseModel):
    """Realtime payload pushed alongside each persisted notification."""
    id: str
    message: str
    order_id: Optional[str]
    created_at: datetime
    read: bool = False

    class Config:
        from_attributes = True


class MarkAllReadResponse(BaseModel):
    message: str = "All notifications marked as read"
    count: int


class UnreadCountResponse(BaseModel):
    count: int
