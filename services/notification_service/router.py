from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Actor, get_current_user

from .schemas import MarkAllReadResponse, NotificationList, NotificationResponse, UnreadCountResponse
from .service import NotificationService

router = APIRouter()
public_router = APIRouter()

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "notification", "status": "running"}


@router.get("/", response_model=NotificationList)
async def list_notifications(
    limit: Optional[int] = Query(default=None, ge=1),
    actor: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notifications = await NotificationService.list_notifications(db, actor.id, limit)
    return {"notifications": notifications}


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    actor: Actor = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    return {"count": await NotificationService.unread_count(db, actor.id)}


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    actor: Actor = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    count = await NotificationService.mark_all_as_read(db, actor.id)
    return {"count": count}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str,
    actor: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await NotificationService.mark_as_read(db, notification_id, actor.id)
