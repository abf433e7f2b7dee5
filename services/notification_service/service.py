from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.errors import NotFoundError
from shared.security.roles import Role

from .models import Notification
from .repository import NotificationRepository


class NotificationService:

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        user_id: str,
        role: Role,
        message: str,
        order_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(user_id=user_id, role=role, order_id=order_id, message=message)
        return await NotificationRepository.append(db, notification)

    @staticmethod
    async def list_notifications(db: AsyncSession, user_id: str, limit: Optional[int] = None):
        limit = limit or settings.NOTIFICATION_PAGE_LIMIT
        limit = max(1, min(limit, settings.NOTIFICATION_PAGE_MAX))
        return await NotificationRepository.list_by_user(db, user_id, limit)

    @staticmethod
    async def mark_as_read(db: AsyncSession, notification_id: str, user_id: str) -> Notification:
        # Someone else's notification is indistinguishable from a missing one
        notification = await NotificationRepository.get_owned(db, notification_id, user_id)
        if not notification:
            raise NotFoundError("Notification not found")
        return await NotificationRepository.mark_read(db, notification)

    @staticmethod
    async def mark_all_as_read(db: AsyncSession, user_id: str) -> int:
        return await NotificationRepository.mark_all_read(db, user_id)

    @staticmethod
    async def unread_count(db: AsyncSession, user_id: str) -> int:
        return await NotificationRepository.count_unread(db, user_id)
