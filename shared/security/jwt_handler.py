from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt

from shared.config import settings

if not settings.JWT_SECRET_KEY:
    raise ValueError("FATAL ERROR: JWT_SECRET_KEY is not set in the environment!")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Signs `data` (expects `sub` and `role` claims) with a UTC expiry."""
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_access_token(token: str) -> dict | None:
    """Returns the claims of a valid token, None if it is malformed or expired."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
