from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import settings
from shared.config.database import init_db
from shared.observability import setup_observability

# IMPORTANT: importing the sub-apps registers every model with Base
from services.auth_service.main import auth_app
from services.restaurant_service.main import restaurant_app
from services.order_service.main import order_app
from services.payment_service.main import payment_app
from services.notification_service.main import notification_app
from services.realtime_service.main import realtime_app

app = FastAPI(title="Food Delivery Cluster")

# Root app owns /metrics and the request-level Prometheus instrumentation
setup_observability(app, "food_delivery", metrics=True)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS + ([settings.CLIENT_URL] if settings.CLIENT_URL else []),
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

@app.on_event("startup")
async def startup_event():
    # Create schemas and all tables
    await init_db()

@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

app.mount("/auth", auth_app)
app.mount("/restaurants", restaurant_app)
app.mount("/orders", order_app)
app.mount("/payments", payment_app)
app.mount("/notifications", notification_app)
app.mount("/realtime", realtime_app)
