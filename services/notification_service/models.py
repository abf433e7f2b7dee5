from sqlalchemy import Boolean, Column, Enum, Index, String, Text

from shared.config.database import Base, TimestampMixin, new_id
from shared.security.roles import Role


class Notification(TimestampMixin, Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "read"),
        {"schema": "notification_schema"},
    )

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)  # recipient
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False)
    order_id = Column(String(36), nullable=True, index=True)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
