from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shared.config.database import init_db
from shared.errors import register_exception_handlers
from shared.observability import setup_observability
from shared.security import limiter

from .models import User  # noqa: F401  registers model with SQLAlchemy Base
from .router import router, public_router

auth_app = FastAPI(
    title="Auth Service",
    version="1.0.0",
    description="JWT authentication: register, login, profile.",
)

setup_observability(auth_app, "auth_service")
register_exception_handlers(auth_app)

# --- SECURITY SETUP ---
auth_app.state.limiter = limiter
auth_app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

auth_app.include_router(public_router)
auth_app.include_router(router)

@auth_app.on_event("startup")
async def startup_event() -> None:
    await init_db("auth_schema")
