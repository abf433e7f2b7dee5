from fastapi import FastAPI

from shared.config.database import init_db
from shared.errors import register_exception_handlers
from shared.observability import setup_observability

from .models import Notification  # noqa: F401  registers model with SQLAlchemy Base
from .router import router, public_router

notification_app = FastAPI(title="Notification Service", version="1.0.0")

setup_observability(notification_app, "notification_service")
register_exception_handlers(notification_app)

notification_app.include_router(public_router)
notification_app.include_router(router)

@notification_app.on_event("startup")
async def startup_event():
    await init_db("notification_schema")
