from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from shared.config import settings
from .dependencies import actor_from_token


def user_id_or_ip(request: Request) -> str:
    """Key function for SlowAPI: the account id when a valid token is sent, else the client IP."""
    auth_header = request.headers.get("Authorization", "")
    token = auth_header[7:] if auth_header.startswith("Bearer ") else None
    actor = actor_from_token(token)
    if actor is not None:
        return f"user:{actor.id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=user_id_or_ip, enabled=settings.RATE_LIMIT_ENABLED)
