import asyncio
import os
import tempfile
from decimal import Decimal

# Must be set before any project module is imported
_DB_DIR = tempfile.mkdtemp(prefix="food-delivery-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OTEL_ENABLED"] = "false"

import httpx
import pytest
import pytest_asyncio

from main import app
from shared.config.database import AsyncSessionLocal, Base, engine
from shared.security import Actor, Role, create_access_token
from services.auth_service.models import User
from services.realtime_service.fanout import RealtimeFanout
from services.restaurant_service.models import MenuItem, Restaurant


class FakeSocket:
    """Stands in for a websocket: records every envelope it is sent."""

    def __init__(self):
        self.messages = []

    async def send_json(self, data, mode="text"):
        self.messages.append(data)

    def events(self):
        return [m["event"] for m in self.messages]

    def payloads(self, event):
        return [m["data"] for m in self.messages if m["event"] == event]


class BrokenSocket(FakeSocket):
    async def send_json(self, data, mode="text"):
        raise RuntimeError("connection reset")


class StalledSocket(FakeSocket):
    async def send_json(self, data, mode="text"):
        await asyncio.sleep(30)


@pytest_asyncio.fixture
async def schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def db(schema):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(schema):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def fanout():
    return RealtimeFanout(send_timeout=0.2)


async def create_user(db, role: Role, name: str) -> User:
    user = User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        hashed_password="not-used-in-tests",
        role=role,
    )
    db.add(user)
    await db.commit()
    return user


def actor_of(user: User) -> Actor:
    return Actor(id=user.id, role=user.role)


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": user.id, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def customer(db):
    return await create_user(db, Role.CUSTOMER, "Casey Customer")


@pytest_asyncio.fixture
async def owner(db):
    return await create_user(db, Role.RESTAURANT, "Olive Owner")


@pytest_asyncio.fixture
async def rider(db):
    return await create_user(db, Role.RIDER, "Riley Rider")


@pytest_asyncio.fixture
async def other_rider(db):
    return await create_user(db, Role.RIDER, "Robin Rider")


@pytest_asyncio.fixture
async def restaurant(db, owner):
    restaurant = Restaurant(
        owner_id=owner.id,
        name="Curry Corner",
        cuisine="Indian",
        menu_items=[
            MenuItem(name="Paneer Tikka", price=Decimal("10.00")),
            MenuItem(name="Garlic Naan", price=Decimal("5.00")),
        ],
    )
    db.add(restaurant)
    await db.commit()
    return restaurant


def menu_item(restaurant: Restaurant, name: str) -> MenuItem:
    return next(item for item in restaurant.menu_items if item.name == name)
