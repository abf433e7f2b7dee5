from enum import Enum as PyEnum

from sqlalchemy import Column, Enum, Numeric, String

from shared.config.database import Base, TimestampMixin, new_id


class PaymentStatus(str, PyEnum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Payment(TimestampMixin, Base):
    __tablename__ = "payments"
    __table_args__ = {"schema": "payment_schema"}

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), unique=True, nullable=False, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(PaymentStatus, native_enum=False, length=20), nullable=False)
    transaction_id = Column(String(80), unique=True, nullable=False)
