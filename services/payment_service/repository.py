from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Payment

class PaymentRepository:
    @staticmethod
    def add_payment(db: AsyncSession, payment: Payment) -> Payment:
        """Stages the payment in the caller's transaction; the caller commits."""
        db.add(payment)
        return payment

    @staticmethod
    async def get_by_order(db: AsyncSession, order_id: str) -> Optional[Payment]:
        result = await db.execute(select(Payment).where(Payment.order_id == order_id))
        return result.scalars().first()
