from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, computed_field

from shared.security.roles import Role

from .models import OrderStatus
from .state_machine import RIDER_VISIBLE_TO_CUSTOMER


class OrderLineCreate(BaseModel):
    menu_item_id: str
    quantity: int

    class Config:
        # Any client-sent price is ignored; totals come from the restaurant menu
        extra = "ignore"


class OrderCreate(BaseModel):
    restaurant_id: str
    items: List[OrderLineCreate]


class StatusUpdate(BaseModel):
    status: str


class OrderLineResponse(BaseModel):
    menu_item_id: str
    name: str
    quantity: int
    unit_price: Decimal

    class Config:
        from_attributes = True

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class PartySummary(BaseModel):
    id: str
    name: str


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    restaurant_id: str
    rider_id: Optional[str]
    rider_assigned: bool
    status: OrderStatus
    total: Decimal
    created_at: datetime
    updated_at: datetime
    lines: List[OrderLineResponse]
    restaurant: Optional[PartySummary] = None
    customer: Optional[PartySummary] = None

    @classmethod
    def from_order(cls, order, restaurant=None, customer=None) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            restaurant_id=order.restaurant_id,
            rider_id=order.rider_id,
            rider_assigned=order.rider_id is not None,
            status=order.status,
            total=order.total,
            created_at=order.created_at,
            updated_at=order.updated_at,
            lines=[OrderLineResponse.model_validate(line) for line in order.lines],
            restaurant=PartySummary(id=restaurant.id, name=restaurant.name) if restaurant else None,
            customer=PartySummary(id=customer.id, name=customer.name) if customer else None,
        )

    def for_audience(self, role: Role) -> "OrderResponse":
        """Customers do not see the rider's identity until the order is picked up."""
        if role == Role.CUSTOMER and self.status not in RIDER_VISIBLE_TO_CUSTOMER:
            return self.model_copy(update={"rider_id": None})
        return self


class OrderList(BaseModel):
    orders: List[OrderResponse]
