from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer
from .jwt_handler import verify_access_token
from .roles import Actor, Role

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def actor_from_token(token: str | None) -> Actor | None:
    """Resolves a bearer token to an Actor. Shared by HTTP and websocket handshakes."""
    if not token:
        return None
    payload = verify_access_token(token)
    if payload is None:
        return None
    user_id = payload.get("sub")
    role = payload.get("role")
    if user_id is None or role is None:
        return None
    try:
        return Actor(id=str(user_id), role=Role(role))
    except ValueError:
        return None


async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)) -> Actor:
    """Dependency to validate JWT and return the calling Actor."""
    actor = actor_from_token(token)
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = actor.id
    return actor


def require_roles(*roles: Role):
    """Dependency factory: only lets through actors holding one of `roles`."""
    async def _checker(actor: Actor = Depends(get_current_user)) -> Actor:
        if actor.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions for this action",
            )
        return actor
    return _checker
