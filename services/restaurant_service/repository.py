from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import MenuItem, Restaurant


class RestaurantRepository:

    @staticmethod
    async def create_restaurant(db: AsyncSession, restaurant: Restaurant) -> Restaurant:
        db.add(restaurant)
        await db.commit()
        await db.refresh(restaurant)
        return restaurant

    @staticmethod
    async def get_all_restaurants(db: AsyncSession):
        result = await db.execute(select(Restaurant).order_by(Restaurant.created_at.desc()))
        return result.scalars().all()

    @staticmethod
    async def get_by_id(db: AsyncSession, restaurant_id: str) -> Optional[Restaurant]:
        result = await db.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_owner(db: AsyncSession, owner_id: str) -> Optional[Restaurant]:
        result = await db.execute(select(Restaurant).where(Restaurant.owner_id == owner_id))
        return result.scalars().first()

    @staticmethod
    async def get_many(db: AsyncSession, restaurant_ids: Iterable[str]) -> dict[str, Restaurant]:
        ids = set(restaurant_ids)
        if not ids:
            return {}
        result = await db.execute(select(Restaurant).where(Restaurant.id.in_(ids)))
        return {r.id: r for r in result.scalars().all()}

    @staticmethod
    async def save(db: AsyncSession, instance):
        db.add(instance)
        await db.commit()
        await db.refresh(instance)
        return instance


class MenuItemRepository:

    @staticmethod
    async def list_for_restaurant(db: AsyncSession, restaurant_id: str):
        result = await db.execute(
            select(MenuItem)
            .where(MenuItem.restaurant_id == restaurant_id)
            .order_by(MenuItem.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def get_by_id(db: AsyncSession, item_id: str) -> Optional[MenuItem]:
        result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
        return result.scalars().first()

    @staticmethod
    async def get_for_restaurant(
        db: AsyncSession, restaurant_id: str, item_ids: Iterable[str]
    ) -> dict[str, MenuItem]:
        """Only returns items that really belong to `restaurant_id`."""
        ids = set(item_ids)
        if not ids:
            return {}
        result = await db.execute(
            select(MenuItem)
            .where(MenuItem.restaurant_id == restaurant_id)
            .where(MenuItem.id.in_(ids))
        )
        return {item.id: item for item in result.scalars().all()}

    @staticmethod
    async def delete(db: AsyncSession, item: MenuItem) -> None:
        await db.delete(item)
        await db.commit()
