from fastapi import FastAPI

from shared.config.database import init_db
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import MenuItem, Restaurant  # noqa: F401  registers models with SQLAlchemy Base
from .router import owner_router, public_router

restaurant_app = FastAPI(
    title="Restaurant Service",
    version="1.0.0"
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(restaurant_app, "restaurant_service")
register_exception_handlers(restaurant_app)

# /me/... routes must be matched before /{restaurant_id}
restaurant_app.include_router(owner_router)
restaurant_app.include_router(public_router)

@restaurant_app.on_event("startup")
async def startup_event():
    await init_db("restaurant_schema")
