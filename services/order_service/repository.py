from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import utcnow
from services.payment_service.models import Payment
from services.payment_service.repository import PaymentRepository

from .models import Order, OrderStatus

class OrderRepository:
    @staticmethod
    async def create_with_lines_and_payment(db: AsyncSession, order: Order, payment: Payment) -> Order:
        """
        Stages the order, its lines (via cascade) and its payment in the current
        transaction. Nothing is visible to other sessions until the caller commits;
        a rollback discards all three together.
        """
        db.add(order)
        PaymentRepository.add_payment(db, payment)
        await db.flush()
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str, refresh: bool = False) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id)
        if refresh:
            # Bypass the identity map after a bulk UPDATE
            stmt = stmt.execution_options(populate_existing=True)
        result = await db.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def conditional_update(db: AsyncSession, order_id: str, *criteria, **values) -> int:
        """
        Single `UPDATE ... WHERE id = :id AND <criteria>` statement.

        The predicate and the mutation are applied atomically by the database,
        so concurrent callers cannot both match. Returns the matched row count.
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, *criteria)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount

    @staticmethod
    async def list_for_customer(db: AsyncSession, customer_id: str):
        result = await db.execute(
            select(Order).where(Order.customer_id == customer_id).order_by(Order.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_for_restaurant(db: AsyncSession, restaurant_id: str):
        result = await db.execute(
            select(Order).where(Order.restaurant_id == restaurant_id).order_by(Order.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_for_rider(db: AsyncSession, rider_id: str):
        result = await db.execute(
            select(Order).where(Order.rider_id == rider_id).order_by(Order.created_at.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_unassigned(db: AsyncSession, statuses: frozenset[OrderStatus]):
        result = await db.execute(
            select(Order)
            .where(Order.rider_id.is_(None))
            .where(Order.status.in_(statuses))
            .order_by(Order.created_at.desc())
        )
        return result.scalars().all()
