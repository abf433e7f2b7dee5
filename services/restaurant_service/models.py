from sqlalchemy import Boolean, Column, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from shared.config.database import Base, TimestampMixin, new_id


class Restaurant(TimestampMixin, Base):
    __tablename__ = "restaurants"
    __table_args__ = {"schema": "restaurant_schema"}

    id = Column(String(36), primary_key=True, default=new_id)
    # One restaurant per owner account (auth_schema.users.id)
    owner_id = Column(String(36), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    cuisine = Column(String(120), nullable=False)
    banner = Column(String(500), nullable=True)

    menu_items = relationship(
        "MenuItem",
        back_populates="restaurant",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="MenuItem.created_at.desc()",
    )


class MenuItem(TimestampMixin, Base):
    __tablename__ = "menu_items"
    __table_args__ = {"schema": "restaurant_schema"}

    id = Column(String(36), primary_key=True, default=new_id)
    restaurant_id = Column(
        String(36), ForeignKey("restaurant_schema.restaurants.id"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(500), nullable=False, default="")
    veg = Column(Boolean, nullable=False, default=True)

    restaurant = relationship("Restaurant", back_populates="menu_items")
