from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, Column, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from shared.config.database import Base, TimestampMixin, new_id


class OrderStatus(str, PyEnum):
    PLACED = "PLACED"
    ACCEPTED = "ACCEPTED"
    PREPARING = "PREPARING"
    READY = "READY"
    PICKED = "PICKED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(TimestampMixin, Base):
    __tablename__ = "orders"
    # We use a separate schema to simulate microservice isolation
    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_orders_total_non_negative"),
        Index("ix_orders_rider_status", "rider_id", "status"),
        {"schema": "order_schema"},
    )

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), nullable=False, index=True)
    restaurant_id = Column(String(36), nullable=False, index=True)
    rider_id = Column(String(36), nullable=True)  # set once by the winning claim
    status = Column(
        Enum(OrderStatus, native_enum=False, length=20),
        nullable=False,
        default=OrderStatus.PLACED,
    )
    total = Column(Numeric(10, 2), nullable=False)  # fixed at creation

    lines = relationship(
        "OrderLine",
        back_populates="order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="OrderLine.position",
    )

    @property
    def reference(self) -> str:
        """Short human-facing order number used in notification text."""
        return self.id[:8].upper()


class OrderLine(Base):
    __tablename__ = "order_lines"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_lines_quantity_positive"),
        {"schema": "order_schema"},
    )

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("order_schema.orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    menu_item_id = Column(String(36), nullable=False)
    name = Column(String(200), nullable=False)  # snapshot, menu items can be renamed/deleted
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)  # price at order time

    order = relationship("Order", back_populates="lines")
