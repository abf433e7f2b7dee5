import structlog
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from shared.config.database import AsyncSessionLocal
from shared.security import Actor, Role, actor_from_token
from services.restaurant_service.repository import RestaurantRepository

from .channels import channels_for
from .fanout import RealtimeFanout, get_fanout

logger = structlog.get_logger(__name__)

router = APIRouter()

@router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "realtime", "status": "running"}


def _handshake_token(websocket: WebSocket, token: str | None) -> str | None:
    if token:
        return token
    auth_header = websocket.headers.get("authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return None


async def resolve_channels(actor: Actor) -> list[str]:
    restaurant_id = None
    if actor.role == Role.RESTAURANT:
        async with AsyncSessionLocal() as db:
            restaurant = await RestaurantRepository.get_by_owner(db, actor.id)
        if restaurant:
            restaurant_id = restaurant.id
    return channels_for(actor, restaurant_id)


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    fanout: RealtimeFanout = Depends(get_fanout),
):
    actor = actor_from_token(_handshake_token(websocket, token))
    if actor is None:
        # Reject before accept: no channel is ever joined
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channels = await resolve_channels(actor)
    await websocket.accept()
    fanout.join(websocket, *channels)
    logger.info("realtime_connected", user_id=actor.id, role=actor.role.value, channels=channels)

    try:
        await websocket.send_json({"event": "CONNECTED", "data": {"channels": channels}})
        while True:
            message = await websocket.receive_json()
            if isinstance(message, dict) and message.get("event") == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    except ValueError as e:
        # Malformed (non-JSON) frame from the client
        logger.warning("realtime_bad_frame", user_id=actor.id, error=str(e))
        await websocket.close(code=status.WS_1003_UNSUPPORTED_DATA)
    finally:
        fanout.leave(websocket)
        logger.info("realtime_disconnected", user_id=actor.id, role=actor.role.value)
