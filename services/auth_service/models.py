from sqlalchemy import Boolean, Column, Enum, String

from shared.config.database import Base, TimestampMixin, new_id
from shared.security.roles import Role


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __table_args__ = {"schema": "auth_schema"}

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False, default=Role.CUSTOMER)
    image = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
