import os
from dotenv import load_dotenv

load_dotenv()

# --- JWT Configuration ---
JWT_SECRET = os.getenv("JWT_SECRET", "change-this-secret-key")
JWT_ALGORITHM = "HS256"
JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "720"))  # 30 days

# --- Database ---
# Default to local SQLite, but prefer environment variable (for hosted Postgres)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/mindtracker.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Calendar ---
# Day boundaries for habit/mood entries are computed in this zone, not the client's
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- CORS ---
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- App ---
APP_NAME = os.getenv("APP_NAME", "MindTracker")
