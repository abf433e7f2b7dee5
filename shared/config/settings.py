import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


# --- Database ---
DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5432")
DB_NAME = os.getenv("POSTGRES_DB", "food_delivery")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
DB_ECHO = _flag("DB_ECHO", "false")

# --- Orders ---
# Off: any authorized party may set any status in the valid set.
STRICT_STATUS_TRANSITIONS = _flag("STRICT_STATUS_TRANSITIONS", "false")

# --- Notifications ---
NOTIFICATION_PAGE_LIMIT = int(os.getenv("NOTIFICATION_PAGE_LIMIT", "50"))
NOTIFICATION_PAGE_MAX = int(os.getenv("NOTIFICATION_PAGE_MAX", "200"))

# --- Security ---
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")
ORDER_RATE_LIMIT = os.getenv("ORDER_RATE_LIMIT", "30/minute")

# --- Observability ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
OTEL_ENABLED = _flag("OTEL_ENABLED", "true")
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4317")

# --- HTTP / Realtime ---
CLIENT_URL = os.getenv("CLIENT_URL", "")
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5000"]
CORS_ORIGIN_REGEX = r"https://.*\.vercel\.app"
REALTIME_SEND_TIMEOUT_SECONDS = float(os.getenv("REALTIME_SEND_TIMEOUT_SECONDS", "2.0"))
