from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import utcnow

from .models import Notification


class NotificationRepository:

    @staticmethod
    async def append(db: AsyncSession, notification: Notification) -> Notification:
        """Stages a notification in the caller's transaction and assigns its id/timestamps."""
        db.add(notification)
        await db.flush()
        return notification

    @staticmethod
    async def list_by_user(db: AsyncSession, user_id: str, limit: int):
        result = await db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def get_owned(db: AsyncSession, notification_id: str, user_id: str) -> Optional[Notification]:
        result = await db.execute(
            select(Notification)
            .where(Notification.id == notification_id)
            .where(Notification.user_id == user_id)
        )
        return result.scalars().first()

    @staticmethod
    async def mark_read(db: AsyncSession, notification: Notification) -> Notification:
        if not notification.read:
            notification.read = True
            await db.commit()
            await db.refresh(notification)
        return notification

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read.is_(False))
            .values(read=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    async def count_unread(db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read.is_(False))
        )
        return result.scalar_one()
