from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Actor, Role, require_roles

from .schemas import PaymentResponse
from .service import PaymentService

router = APIRouter()
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "payment", "status": "running"}


@router.get("/orders/{order_id}", response_model=PaymentResponse)
async def get_order_payment(
    order_id: str,
    actor: Actor = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    return await PaymentService.get_for_order(db, order_id, actor)
