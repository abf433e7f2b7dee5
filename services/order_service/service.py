from decimal import Decimal
from typing import Iterable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import settings
from shared.config.database import new_id
from shared.errors import ForbiddenError, InvalidItemError, InvalidTransitionError, NotFoundError
from shared.observability import food_order_transitions_total, food_orders_created_total
from shared.security.roles import Actor, Role
from services.auth_service.repository import UserRepository
from services.notification_service.models import Notification
from services.notification_service.schemas import NotificationEvent
from services.notification_service.service import NotificationService
from services.payment_service.service import PaymentService
from services.realtime_service.fanout import RealtimeFanout
from services.restaurant_service.repository import MenuItemRepository, RestaurantRepository

from . import state_machine as sm
from .models import Order, OrderLine, OrderStatus
from .repository import OrderRepository
from .schemas import OrderCreate, OrderResponse

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")
# Largest value Order.total (Numeric(10, 2)) can hold
MAX_ORDER_TOTAL = Decimal("99999999.99")


# --- Side-effect plumbing shared with rider_assignment ---

async def stage_notices(
    db: AsyncSession, order_id: str, effects: sm.TransitionEffects
) -> list[tuple[sm.Notice, Notification]]:
    """Adds one notification row per notice to the current transaction."""
    records = []
    for notice in effects.notices:
        record = await NotificationService.create_notification(
            db, user_id=notice.user_id, role=notice.role, message=notice.message, order_id=order_id
        )
        records.append((notice, record))
    return records


async def broadcast(
    fanout: RealtimeFanout,
    view: OrderResponse,
    effects: sm.TransitionEffects,
    records: list[tuple[sm.Notice, Notification]],
) -> None:
    """Pushes the committed transition to every affected channel. Never raises."""
    try:
        for target in effects.broadcasts:
            order_view = view.for_audience(target.audience).model_dump(mode="json")
            if target.event == sm.ORDER_STATUS_UPDATE:
                payload = {"order_id": view.id, "status": view.status.value, "order": order_view}
            else:
                payload = order_view
            await fanout.publish(target.channel, target.event, payload)

        for notice, record in records:
            event = NotificationEvent.model_validate(record).model_dump(mode="json")
            await fanout.publish(notice.channel, sm.NOTIFICATION, event)
    except Exception:
        # The transition is already committed; a delivery problem must not surface
        logger.exception("order_broadcast_failed", order_id=view.id)


class OrderService:

    @staticmethod
    async def load_parties(db: AsyncSession, order: Order) -> sm.OrderParties:
        restaurant = await RestaurantRepository.get_by_id(db, order.restaurant_id)
        return sm.OrderParties(
            customer_id=order.customer_id,
            restaurant_id=order.restaurant_id,
            restaurant_owner_id=restaurant.owner_id if restaurant else None,
            rider_id=order.rider_id,
        )

    @staticmethod
    async def present(db: AsyncSession, orders: Iterable[Order]) -> list[OrderResponse]:
        """Denormalizes orders with restaurant and customer names (batched lookups)."""
        orders = list(orders)
        restaurants = await RestaurantRepository.get_many(db, {o.restaurant_id for o in orders})
        customers = await UserRepository.get_many(db, {o.customer_id for o in orders})
        return [
            OrderResponse.from_order(o, restaurants.get(o.restaurant_id), customers.get(o.customer_id))
            for o in orders
        ]

    @staticmethod
    async def present_one(db: AsyncSession, order: Order) -> OrderResponse:
        return (await OrderService.present(db, [order]))[0]

    @staticmethod
    async def _get_or_404(db: AsyncSession, order_id: str) -> Order:
        order = await OrderRepository.get_order(db, order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    # --- Transitions ---

    @staticmethod
    async def create_order(
        db: AsyncSession, fanout: RealtimeFanout, actor: Actor, data: OrderCreate
    ) -> OrderResponse:
        sm.check_can_place(actor)

        restaurant = await RestaurantRepository.get_by_id(db, data.restaurant_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        if not data.items:
            raise InvalidItemError("Order must contain at least one item")

        menu = await MenuItemRepository.get_for_restaurant(
            db, restaurant.id, [item.menu_item_id for item in data.items]
        )

        # Authoritative prices only: total is computed here and never again
        total = Decimal("0")
        lines = []
        for position, item in enumerate(data.items):
            if item.quantity < 1:
                raise InvalidItemError(f"Quantity for menu item {item.menu_item_id} must be at least 1")
            menu_item = menu.get(item.menu_item_id)
            if menu_item is None:
                raise InvalidItemError(f"Menu item {item.menu_item_id} not found")
            unit_price = Decimal(menu_item.price).quantize(CENT)
            total += unit_price * item.quantity
            lines.append(OrderLine(
                position=position,
                menu_item_id=menu_item.id,
                name=menu_item.name,
                quantity=item.quantity,
                unit_price=unit_price,
            ))
        total = total.quantize(CENT)
        if total > MAX_ORDER_TOTAL:
            raise InvalidItemError(f"Order total exceeds the maximum of {MAX_ORDER_TOTAL}")

        order_id = new_id()
        order = Order(
            id=order_id,
            customer_id=actor.id,
            restaurant_id=restaurant.id,
            status=OrderStatus.PLACED,
            total=total,
            lines=lines,
        )
        payment = PaymentService.build_successful_payment(order_id, actor.id, total)
        await OrderRepository.create_with_lines_and_payment(db, order, payment)

        parties = sm.OrderParties(
            customer_id=actor.id,
            restaurant_id=restaurant.id,
            restaurant_owner_id=restaurant.owner_id,
            rider_id=None,
        )
        effects = sm.effects_for_creation(order.reference, parties)
        records = await stage_notices(db, order.id, effects)
        await db.commit()

        food_orders_created_total.inc()
        food_order_transitions_total.labels(status=OrderStatus.PLACED.value).inc()
        logger.info("order_placed", order_id=order.id, restaurant_id=restaurant.id, total=str(total))

        view = await OrderService.present_one(db, order)
        await broadcast(fanout, view, effects, records)
        return view

    @staticmethod
    async def accept_order(
        db: AsyncSession, fanout: RealtimeFanout, order_id: str, actor: Actor
    ) -> OrderResponse:
        order = await OrderService._get_or_404(db, order_id)
        parties = await OrderService.load_parties(db, order)
        sm.check_accept(order.status, actor, parties)

        matched = await OrderRepository.conditional_update(
            db, order.id, Order.status == OrderStatus.PLACED, status=OrderStatus.ACCEPTED
        )
        if not matched:
            await db.rollback()
            raise InvalidTransitionError("Order was updated concurrently; refresh and retry")

        order = await OrderRepository.get_order(db, order.id, refresh=True)
        effects = sm.effects_for_accept(order.reference, parties)
        records = await stage_notices(db, order.id, effects)
        await db.commit()

        food_order_transitions_total.labels(status=OrderStatus.ACCEPTED.value).inc()
        logger.info("order_accepted", order_id=order.id, restaurant_id=order.restaurant_id)

        view = await OrderService.present_one(db, order)
        await broadcast(fanout, view, effects, records)
        return view

    @staticmethod
    async def update_status(
        db: AsyncSession, fanout: RealtimeFanout, order_id: str, actor: Actor, raw_status: str
    ) -> OrderResponse:
        target = sm.parse_update_target(raw_status)
        order = await OrderService._get_or_404(db, order_id)
        parties = await OrderService.load_parties(db, order)
        previous = order.status
        relation = sm.check_status_update(
            previous, target, actor, parties, strict=settings.STRICT_STATUS_TRANSITIONS
        )

        # Guard on the status and rider the effects below are computed from
        if parties.rider_id is None:
            rider_unchanged = Order.rider_id.is_(None)
        else:
            rider_unchanged = Order.rider_id == parties.rider_id
        matched = await OrderRepository.conditional_update(
            db, order.id, Order.status == previous, rider_unchanged, status=target
        )
        if not matched:
            await db.rollback()
            raise InvalidTransitionError("Order was updated concurrently; refresh and retry")

        order = await OrderRepository.get_order(db, order.id, refresh=True)
        effects = sm.effects_for_status_update(order.reference, previous, target, parties, relation)
        records = await stage_notices(db, order.id, effects)
        await db.commit()

        food_order_transitions_total.labels(status=target.value).inc()
        logger.info(
            "order_status_updated",
            order_id=order.id,
            previous=previous.value,
            status=target.value,
            actor_role=actor.role.value,
        )

        view = await OrderService.present_one(db, order)
        await broadcast(fanout, view, effects, records)
        return view

    # --- Queries ---

    @staticmethod
    async def get_order(db: AsyncSession, order_id: str, actor: Actor) -> OrderResponse:
        order = await OrderService._get_or_404(db, order_id)
        parties = await OrderService.load_parties(db, order)
        if not sm.can_view(actor, parties):
            raise ForbiddenError("Not authorized")
        view = await OrderService.present_one(db, order)
        return view.for_audience(actor.role)

    @staticmethod
    async def list_my_orders(db: AsyncSession, actor: Actor) -> list[OrderResponse]:
        if actor.role == Role.CUSTOMER:
            orders = await OrderRepository.list_for_customer(db, actor.id)
        elif actor.role == Role.RESTAURANT:
            restaurant = await RestaurantRepository.get_by_owner(db, actor.id)
            if not restaurant:
                return []
            orders = await OrderRepository.list_for_restaurant(db, restaurant.id)
        elif actor.role == Role.RIDER:
            orders = await OrderRepository.list_for_rider(db, actor.id)
        else:
            raise ForbiddenError("Invalid role")
        views = await OrderService.present(db, orders)
        return [view.for_audience(actor.role) for view in views]

    @staticmethod
    async def list_available(db: AsyncSession) -> list[OrderResponse]:
        orders = await OrderRepository.list_unassigned(db, sm.CLAIMABLE_STATUSES)
        return await OrderService.present(db, orders)
