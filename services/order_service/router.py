from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.config.database import get_db
from shared.security import Actor, Role, get_current_user, limiter, require_roles
from services.realtime_service.fanout import RealtimeFanout, get_fanout

from .rider_assignment import claim_order
from .schemas import OrderCreate, OrderList, OrderResponse, StatusUpdate
from .service import OrderService

router = APIRouter()
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health")
async def health_check():
    return {"service": "order", "status": "running"}


@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.ORDER_RATE_LIMIT)
async def create_order(
    request: Request,                          # REQUIRED: slowapi needs this to check IP/Headers
    payload: OrderCreate,
    actor: Actor = Depends(require_roles(Role.CUSTOMER)),
    db: AsyncSession = Depends(get_db),
    fanout: RealtimeFanout = Depends(get_fanout),
):
    return await OrderService.create_order(db, fanout, actor, payload)


@router.get("/my-orders", response_model=OrderList)
async def get_my_orders(
    actor: Actor = Depends(get_current_user), db: AsyncSession = Depends(get_db)
):
    return {"orders": await OrderService.list_my_orders(db, actor)}


@router.get("/available", response_model=OrderList)
async def get_available_orders(
    actor: Actor = Depends(require_roles(Role.RIDER)), db: AsyncSession = Depends(get_db)
):
    return {"orders": await OrderService.list_available(db)}


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    actor: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.get_order(db, order_id, actor)


@router.post("/{order_id}/accept", response_model=OrderResponse)
async def accept_order(
    order_id: str,
    actor: Actor = Depends(require_roles(Role.RESTAURANT)),
    db: AsyncSession = Depends(get_db),
    fanout: RealtimeFanout = Depends(get_fanout),
):
    return await OrderService.accept_order(db, fanout, order_id, actor)


@router.post("/{order_id}/accept-rider", response_model=OrderResponse)
async def accept_order_by_rider(
    order_id: str,
    actor: Actor = Depends(require_roles(Role.RIDER)),
    db: AsyncSession = Depends(get_db),
    fanout: RealtimeFanout = Depends(get_fanout),
):
    return await claim_order(db, fanout, order_id, actor)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    payload: StatusUpdate,
    actor: Actor = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    fanout: RealtimeFanout = Depends(get_fanout),
):
    return await OrderService.update_status(db, fanout, order_id, actor, payload.status)
