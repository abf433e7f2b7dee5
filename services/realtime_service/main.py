from fastapi import FastAPI

from shared.observability import setup_observability

from .router import router

realtime_app = FastAPI(title="Realtime Service", version="1.0.0")

setup_observability(realtime_app, "realtime_service")

realtime_app.include_router(router)
