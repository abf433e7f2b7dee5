from .jwt_handler import create_access_token, verify_access_token
from .dependencies import actor_from_token, get_current_user, require_roles
from .rate_limiter import limiter, user_id_or_ip
from .roles import Actor, Role

__all__ = [
    "Actor",
    "Role",
    "create_access_token",
    "verify_access_token",
    "actor_from_token",
    "get_current_user",
    "require_roles",
    "limiter",
    "user_id_or_ip"
]
