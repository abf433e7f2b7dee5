from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from main import app
from shared.security import Actor, Role, create_access_token
from services.realtime_service.channels import RIDERS_ONLINE, channels_for, restaurant_channel, user_channel
from services.realtime_service.fanout import fanout as shared_fanout

from .conftest import BrokenSocket, FakeSocket, StalledSocket


class TestChannels:

    def test_customer_joins_own_channel(self):
        assert channels_for(Actor("u1", Role.CUSTOMER)) == ["USER:u1"]

    def test_rider_joins_riders_online(self):
        assert channels_for(Actor("r1", Role.RIDER)) == ["USER:r1", RIDERS_ONLINE]

    def test_restaurant_joins_its_restaurant(self):
        assert channels_for(Actor("o1", Role.RESTAURANT), "rest-1") == ["USER:o1", "RESTAURANT:rest-1"]

    def test_restaurant_without_restaurant(self):
        assert channels_for(Actor("o1", Role.RESTAURANT)) == ["USER:o1"]


class TestFanout:

    async def test_publish_reaches_channel_members_only(self, fanout):
        alice, bob = FakeSocket(), FakeSocket()
        fanout.join(alice, user_channel("alice"))
        fanout.join(bob, user_channel("bob"))

        delivered = await fanout.publish(user_channel("alice"), "PING", {"n": 1})

        assert delivered == 1
        assert alice.messages == [{"event": "PING", "data": {"n": 1}}]
        assert bob.messages == []

    async def test_publish_to_empty_channel(self, fanout):
        assert await fanout.publish(RIDERS_ONLINE, "ORDER_AVAILABLE", {}) == 0

    async def test_one_socket_in_many_channels(self, fanout):
        rider = FakeSocket()
        fanout.join(rider, user_channel("r1"), RIDERS_ONLINE)

        await fanout.publish(RIDERS_ONLINE, "ORDER_AVAILABLE", {"id": "o1"})
        await fanout.publish(user_channel("r1"), "NOTIFICATION", {"id": "n1"})

        assert rider.events() == ["ORDER_AVAILABLE", "NOTIFICATION"]

    async def test_broken_socket_is_dropped(self, fanout):
        healthy, broken = FakeSocket(), BrokenSocket()
        fanout.join(healthy, RIDERS_ONLINE)
        fanout.join(broken, RIDERS_ONLINE, user_channel("r2"))

        delivered = await fanout.publish(RIDERS_ONLINE, "ORDER_AVAILABLE", {"id": "o1"})

        assert delivered == 1
        assert healthy.events() == ["ORDER_AVAILABLE"]
        assert fanout.subscribers(RIDERS_ONLINE) == 1
        assert fanout.subscribers(user_channel("r2")) == 0

    async def test_stalled_socket_times_out(self, fanout):
        healthy, stalled = FakeSocket(), StalledSocket()
        fanout.join(healthy, RIDERS_ONLINE)
        fanout.join(stalled, RIDERS_ONLINE)

        delivered = await fanout.publish(RIDERS_ONLINE, "ORDER_ASSIGNED", {"id": "o1"})

        assert delivered == 1
        assert fanout.subscribers(RIDERS_ONLINE) == 1

    async def test_leave_is_idempotent(self, fanout):
        socket = FakeSocket()
        fanout.join(socket, user_channel("u1"), RIDERS_ONLINE)

        fanout.leave(socket)
        fanout.leave(socket)

        assert fanout.subscribers(user_channel("u1")) == 0
        assert fanout.subscribers(RIDERS_ONLINE) == 0

    async def test_payload_is_json_encoded(self, fanout):
        socket = FakeSocket()
        fanout.join(socket, restaurant_channel("rest-1"))

        await fanout.publish(
            restaurant_channel("rest-1"),
            "NEW_ORDER",
            {"total": Decimal("20.00"), "at": datetime(2026, 1, 1, 12, 0)},
        )

        assert socket.messages[0]["data"] == {"total": 20.0, "at": "2026-01-01T12:00:00"}


def _token(user_id, role):
    return create_access_token({"sub": user_id, "role": role.value})


class TestWebsocket:

    def test_rejects_missing_token(self):
        client = TestClient(app)
        with pytest.raises(WebSocketDisconnect) as excinfo:
            with client.websocket_connect("/realtime/ws") as ws:
                ws.receive_json()
        assert excinfo.value.code == 1008

    def test_rejects_invalid_token(self):
        client = TestClient(app)
        with pytest.raises(WebSocketDisconnect) as excinfo:
            with client.websocket_connect("/realtime/ws?token=not-a-jwt") as ws:
                ws.receive_json()
        assert excinfo.value.code == 1008

    def test_rider_connects_and_pings(self):
        client = TestClient(app)
        token = _token("rider-ws", Role.RIDER)

        with client.websocket_connect(f"/realtime/ws?token={token}") as ws:
            hello = ws.receive_json()
            assert hello == {
                "event": "CONNECTED",
                "data": {"channels": ["USER:rider-ws", RIDERS_ONLINE]},
            }
            assert shared_fanout.subscribers(user_channel("rider-ws")) == 1

            ws.send_json({"event": "ping"})
            assert ws.receive_json() == {"event": "pong"}

        assert shared_fanout.subscribers(user_channel("rider-ws")) == 0

    def test_bearer_header_is_accepted(self):
        client = TestClient(app)
        token = _token("customer-ws", Role.CUSTOMER)

        with client.websocket_connect(
            "/realtime/ws", headers={"Authorization": f"Bearer {token}"}
        ) as ws:
            assert ws.receive_json()["data"]["channels"] == ["USER:customer-ws"]
