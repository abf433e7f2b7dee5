"""
In-process realtime fan-out.

Keeps a registry of channel -> open websockets and pushes JSON envelopes
`{"event": ..., "data": ...}` to every socket in a channel. Delivery is
best-effort and at-most-once: publish never raises, a socket that fails or
times out is dropped, and nothing is buffered for offline users (they read
their notification inbox instead).
"""
import asyncio
from collections import defaultdict
from typing import Any, Protocol

import structlog
from fastapi.encoders import jsonable_encoder

from shared.config import settings
from shared.observability import food_realtime_connections, food_realtime_publish_failures_total

logger = structlog.get_logger(__name__)


class RealtimeSocket(Protocol):
    async def send_json(self, data: Any, mode: str = "text") -> None: ...


class RealtimeFanout:

    def __init__(self, send_timeout: float | None = None):
        self._channels: dict[str, set[RealtimeSocket]] = defaultdict(set)
        self._memberships: dict[RealtimeSocket, set[str]] = defaultdict(set)
        self._send_timeout = send_timeout or settings.REALTIME_SEND_TIMEOUT_SECONDS

    def join(self, socket: RealtimeSocket, *channels: str) -> None:
        if socket not in self._memberships:
            food_realtime_connections.inc()
        for channel in channels:
            self._channels[channel].add(socket)
            self._memberships[socket].add(channel)

    def leave(self, socket: RealtimeSocket) -> None:
        channels = self._memberships.pop(socket, None)
        if channels is None:
            return
        food_realtime_connections.dec()
        for channel in channels:
            members = self._channels.get(channel)
            if members is None:
                continue
            members.discard(socket)
            if not members:
                del self._channels[channel]

    def subscribers(self, channel: str) -> int:
        return len(self._channels.get(channel, ()))

    async def publish(self, channel: str, event: str, payload: Any) -> int:
        """Sends `event` to every socket in `channel`. Returns how many sockets got it."""
        members = list(self._channels.get(channel, ()))
        if not members:
            return 0
        try:
            message = {"event": event, "data": jsonable_encoder(payload)}
        except Exception as e:
            logger.error("realtime_encode_failed", channel=channel, realtime_event=event, error=str(e))
            food_realtime_publish_failures_total.labels(event=event).inc()
            return 0

        results = await asyncio.gather(
            *(self._send(socket, message) for socket in members),
            return_exceptions=True,
        )
        delivered = 0
        for socket, outcome in zip(members, results):
            if outcome is True:
                delivered += 1
                continue
            logger.warning(
                "realtime_send_failed",
                channel=channel,
                realtime_event=event,
                error=repr(outcome),
            )
            food_realtime_publish_failures_total.labels(event=event).inc()
            self.leave(socket)
        return delivered

    async def _send(self, socket: RealtimeSocket, message: dict) -> bool:
        await asyncio.wait_for(socket.send_json(message), timeout=self._send_timeout)
        return True


# Process-wide registry shared by the websocket endpoint and the order service
fanout = RealtimeFanout()


def get_fanout() -> RealtimeFanout:
    return fanout
