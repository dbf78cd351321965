import os

from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./eventscale.db")
if DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql", "postgresql+asyncpg", 1)
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

# Public links
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5173").rstrip("/")
CHAT_BASE_URL = os.getenv("CHAT_BASE_URL", "https://wa.me").rstrip("/")
DEFAULT_COUNTRY_CODE = os.getenv("DEFAULT_COUNTRY_CODE", "55")

# Scale entries created with this role are invitations, not service assignments
GUEST_ROLE = os.getenv("GUEST_ROLE", "Guest")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# Per-subscriber buffer for realtime dashboard updates
REALTIME_QUEUE_SIZE = int(os.getenv("REALTIME_QUEUE_SIZE", 100))
