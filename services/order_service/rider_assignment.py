"""
First-come-first-served rider claims.

Many riders may tap "accept" on the same order at once. The winner is decided
by one conditional UPDATE (`rider_id IS NULL AND status IN claimable`): the
database applies predicate and write atomically, so exactly one claim matches
a row and every other claim matches zero and fails with AlreadyAssigned. No
application-level lock is involved, which keeps this correct across replicas.
Losers are not retried; clients refresh their available-orders list.
"""
import structlog
from sqlalchemy import case, literal
from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import AlreadyAssignedError, ForbiddenError, NotFoundError
from shared.observability import food_order_transitions_total, food_rider_claims_total
from shared.security.roles import Actor, Role
from services.realtime_service.fanout import RealtimeFanout

from . import state_machine as sm
from .models import Order, OrderStatus
from .repository import OrderRepository
from .schemas import OrderResponse
from .service import OrderService, broadcast, stage_notices

logger = structlog.get_logger(__name__)

# READY stays READY so the kitchen's "ready for pickup" action is not offered
# twice; earlier claimable states become PREPARING. Evaluated inside the UPDATE
# so it sees the same row version as the predicate.
_STATUS_AFTER_CLAIM = case(
    (Order.status == OrderStatus.READY, literal(OrderStatus.READY.value)),
    else_=literal(OrderStatus.PREPARING.value),
)


async def claim_order(
    db: AsyncSession, fanout: RealtimeFanout, order_id: str, rider: Actor
) -> OrderResponse:
    if rider.role != Role.RIDER:
        raise ForbiddenError("Only riders can claim orders")

    order = await OrderRepository.get_order(db, order_id)
    if not order:
        raise NotFoundError("Order not found")
    sm.check_claimable(order.status, order.rider_id)

    matched = await OrderRepository.conditional_update(
        db,
        order.id,
        Order.rider_id.is_(None),
        Order.status.in_(sm.CLAIMABLE_STATUSES),
        rider_id=rider.id,
        status=_STATUS_AFTER_CLAIM,
    )
    if not matched:
        await db.rollback()
        food_rider_claims_total.labels(outcome="lost").inc()
        logger.info("rider_claim_lost", order_id=order_id, rider_id=rider.id)
        raise AlreadyAssignedError()

    order = await OrderRepository.get_order(db, order_id, refresh=True)
    parties = await OrderService.load_parties(db, order)
    effects = sm.effects_for_claim(order.reference, parties)
    records = await stage_notices(db, order.id, effects)
    await db.commit()

    food_rider_claims_total.labels(outcome="won").inc()
    food_order_transitions_total.labels(status=order.status.value).inc()
    logger.info("rider_claim_won", order_id=order.id, rider_id=rider.id, status=order.status.value)

    view = await OrderService.present_one(db, order)
    await broadcast(fanout, view, effects, records)
    return view
