import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from . import settings

# One Postgres schema per service to keep microservice-style isolation
SERVICE_SCHEMAS = (
    "auth_schema",
    "restaurant_schema",
    "order_schema",
    "payment_schema",
    "notification_schema",
)

DATABASE_URL = settings.DATABASE_URL
IS_SQLITE = DATABASE_URL.startswith("sqlite")

_engine_kwargs = {"echo": settings.DB_ECHO}
if IS_SQLITE:
    # SQLite has no schemas: every service table lands in the main database.
    # NullPool keeps aiosqlite connections from leaking across event loops.
    _engine_kwargs["poolclass"] = NullPool
    _engine_kwargs["execution_options"] = {
        "schema_translate_map": {name: None for name in SERVICE_SCHEMAS}
    }

engine = create_async_engine(DATABASE_URL, **_engine_kwargs)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def init_db(*schemas: str) -> None:
    """Create the given schemas (all service schemas by default) and every registered table."""
    async with engine.begin() as conn:
        if not IS_SQLITE:
            for schema in schemas or SERVICE_SCHEMAS:
                await conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {schema}"))
        await conn.run_sync(Base.metadata.create_all)
