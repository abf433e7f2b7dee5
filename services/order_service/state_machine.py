"""
Order lifecycle rules.

Everything here is pure: given the current order facts and the acting party,
decide whether a transition is allowed and which notifications/broadcasts it
produces. Persistence and delivery live in service.py / rider_assignment.py.

    PLACED -> ACCEPTED -> PREPARING -> READY -> PICKED -> DELIVERED
    (any non-terminal) -> CANCELLED
"""
from dataclasses import dataclass, field
from enum import Enum

from shared.errors import (
    AlreadyAssignedError,
    ForbiddenError,
    InvalidStatusError,
    InvalidTransitionError,
)
from shared.security.roles import Actor, Role
from services.realtime_service.channels import RIDERS_ONLINE, restaurant_channel, user_channel

from .models import OrderStatus

# --- Realtime event names ---
ORDER_STATUS_UPDATE = "ORDER_STATUS_UPDATE"
NOTIFICATION = "NOTIFICATION"
NEW_ORDER = "NEW_ORDER"
ORDER_AVAILABLE = "ORDER_AVAILABLE"
ORDER_ASSIGNED = "ORDER_ASSIGNED"
ORDER_WITHDRAWN = "ORDER_WITHDRAWN"

CLAIMABLE_STATUSES = frozenset({OrderStatus.ACCEPTED, OrderStatus.PREPARING, OrderStatus.READY})

# Targets reachable through the generic PATCH /status path
STATUS_UPDATE_TARGETS = frozenset({
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.PICKED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
})

# Customers only learn who the rider is once the food is on its way
RIDER_VISIBLE_TO_CUSTOMER = frozenset({OrderStatus.PICKED, OrderStatus.DELIVERED})

# Only enforced when STRICT_STATUS_TRANSITIONS is on
STRICT_SUCCESSORS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PLACED: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.PICKED, OrderStatus.CANCELLED}),
    OrderStatus.PICKED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

STATUS_PHRASES = {
    OrderStatus.PLACED: "has been placed",
    OrderStatus.ACCEPTED: "has been accepted",
    OrderStatus.PREPARING: "is being prepared",
    OrderStatus.READY: "is ready for pickup",
    OrderStatus.PICKED: "has been picked up",
    OrderStatus.DELIVERED: "has been delivered",
    OrderStatus.CANCELLED: "has been cancelled",
}


class Relation(str, Enum):
    CUSTOMER = "CUSTOMER"
    RESTAURANT = "RESTAURANT"
    RIDER = "RIDER"
    NONE = "NONE"


@dataclass(frozen=True)
class OrderParties:
    customer_id: str
    restaurant_id: str
    restaurant_owner_id: str | None
    rider_id: str | None


@dataclass(frozen=True)
class Notice:
    """A notification to persist for one recipient, and the channel it is pushed on."""
    user_id: str
    role: Role
    channel: str
    message: str


@dataclass(frozen=True)
class Broadcast:
    channel: str
    event: str
    audience: Role  # decides which view of the order the channel receives


@dataclass
class TransitionEffects:
    notices: list[Notice] = field(default_factory=list)
    broadcasts: list[Broadcast] = field(default_factory=list)


# --- Authorization ---

def relation_of(actor: Actor, parties: OrderParties) -> Relation:
    if actor.role == Role.CUSTOMER:
        return Relation.CUSTOMER if actor.id == parties.customer_id else Relation.NONE
    if actor.role == Role.RESTAURANT:
        owns = parties.restaurant_owner_id is not None and actor.id == parties.restaurant_owner_id
        return Relation.RESTAURANT if owns else Relation.NONE
    if actor.role == Role.RIDER:
        assigned = parties.rider_id is not None and actor.id == parties.rider_id
        return Relation.RIDER if assigned else Relation.NONE
    if actor.role == Role.ADMIN:
        return Relation.NONE
    raise ValueError(f"Unhandled role: {actor.role!r}")


def can_view(actor: Actor, parties: OrderParties) -> bool:
    return actor.role == Role.ADMIN or relation_of(actor, parties) != Relation.NONE


def check_can_place(actor: Actor) -> None:
    if actor.role != Role.CUSTOMER:
        raise ForbiddenError("Only customers can place orders")


def check_accept(status: OrderStatus, actor: Actor, parties: OrderParties) -> None:
    if relation_of(actor, parties) != Relation.RESTAURANT:
        raise ForbiddenError("Not authorized to accept this order")
    if status != OrderStatus.PLACED:
        raise InvalidTransitionError(f"Order cannot be accepted. Current status: {status.value}")


def parse_update_target(raw: str) -> OrderStatus:
    try:
        target = OrderStatus(raw)
    except ValueError:
        raise InvalidStatusError(f"Invalid status: {raw}") from None
    if target not in STATUS_UPDATE_TARGETS:
        raise InvalidStatusError(f"Invalid status: {raw}")
    return target


def check_status_update(
    current: OrderStatus,
    target: OrderStatus,
    actor: Actor,
    parties: OrderParties,
    strict: bool = False,
) -> Relation:
    """Returns the actor's relation to the order when the update is allowed."""
    relation = relation_of(actor, parties)
    if relation == Relation.NONE:
        raise ForbiddenError("Not authorized")
    if relation == Relation.CUSTOMER and target != OrderStatus.CANCELLED:
        raise ForbiddenError("Customers can only cancel their own orders")
    if strict and target not in STRICT_SUCCESSORS[current]:
        raise InvalidTransitionError(
            f"Order cannot move from {current.value} to {target.value}"
        )
    return relation


def check_claimable(status: OrderStatus, rider_id: str | None) -> None:
    if status not in CLAIMABLE_STATUSES:
        raise InvalidTransitionError(f"Order cannot be accepted. Current status: {status.value}")
    if rider_id is not None:
        raise AlreadyAssignedError()


# --- Side effects ---

def status_message(reference: str, status: OrderStatus) -> str:
    return f"Order #{reference} {STATUS_PHRASES[status]}"


def _restaurant_notice(parties: OrderParties, message: str) -> list[Notice]:
    if parties.restaurant_owner_id is None:
        return []
    return [Notice(
        user_id=parties.restaurant_owner_id,
        role=Role.RESTAURANT,
        channel=restaurant_channel(parties.restaurant_id),
        message=message,
    )]


def effects_for_creation(reference: str, parties: OrderParties) -> TransitionEffects:
    customer = user_channel(parties.customer_id)
    restaurant = restaurant_channel(parties.restaurant_id)
    return TransitionEffects(
        notices=[
            Notice(parties.customer_id, Role.CUSTOMER, customer,
                   status_message(reference, OrderStatus.PLACED)),
            *_restaurant_notice(parties, f"New order #{reference} received"),
        ],
        broadcasts=[
            Broadcast(customer, ORDER_STATUS_UPDATE, Role.CUSTOMER),
            Broadcast(restaurant, NEW_ORDER, Role.RESTAURANT),
        ],
    )


def effects_for_accept(reference: str, parties: OrderParties) -> TransitionEffects:
    customer = user_channel(parties.customer_id)
    return TransitionEffects(
        notices=[
            Notice(parties.customer_id, Role.CUSTOMER, customer,
                   status_message(reference, OrderStatus.ACCEPTED)),
        ],
        broadcasts=[
            Broadcast(customer, ORDER_STATUS_UPDATE, Role.CUSTOMER),
            Broadcast(restaurant_channel(parties.restaurant_id), ORDER_STATUS_UPDATE, Role.RESTAURANT),
            # Riders see a new order in their "available" list
            Broadcast(RIDERS_ONLINE, ORDER_AVAILABLE, Role.RIDER),
        ],
    )


def effects_for_claim(reference: str, parties: OrderParties) -> TransitionEffects:
    customer = user_channel(parties.customer_id)
    return TransitionEffects(
        notices=[
            Notice(parties.customer_id, Role.CUSTOMER, customer,
                   f"Order #{reference} has been picked up by a rider"),
            *_restaurant_notice(parties, f"Order #{reference} has been assigned to a rider"),
        ],
        broadcasts=[
            Broadcast(customer, ORDER_STATUS_UPDATE, Role.CUSTOMER),
            Broadcast(restaurant_channel(parties.restaurant_id), ORDER_STATUS_UPDATE, Role.RESTAURANT),
            # Losing riders drop the order from their available list
            Broadcast(RIDERS_ONLINE, ORDER_ASSIGNED, Role.RIDER),
        ],
    )


def effects_for_status_update(
    reference: str,
    previous: OrderStatus,
    target: OrderStatus,
    parties: OrderParties,
    actor_relation: Relation,
) -> TransitionEffects:
    message = status_message(reference, target)
    customer = user_channel(parties.customer_id)
    effects = TransitionEffects(
        notices=[Notice(parties.customer_id, Role.CUSTOMER, customer, message)],
        broadcasts=[
            Broadcast(customer, ORDER_STATUS_UPDATE, Role.CUSTOMER),
            Broadcast(restaurant_channel(parties.restaurant_id), ORDER_STATUS_UPDATE, Role.RESTAURANT),
        ],
    )
    if actor_relation != Relation.RESTAURANT:
        effects.notices.extend(_restaurant_notice(parties, message))
    if parties.rider_id is not None:
        rider = user_channel(parties.rider_id)
        effects.notices.append(Notice(parties.rider_id, Role.RIDER, rider, message))
        effects.broadcasts.append(Broadcast(rider, ORDER_STATUS_UPDATE, Role.RIDER))
    elif target == OrderStatus.CANCELLED and previous in CLAIMABLE_STATUSES:
        effects.broadcasts.append(Broadcast(RIDERS_ONLINE, ORDER_WITHDRAWN, Role.RIDER))
    return effects
