"""Runtime configuration, read once from the environment."""
import os

# Use PostgreSQL in production (from DATABASE_URL env var), SQLite locally
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nightguard.db")

# Fix for Render/Heroku: they use postgres:// but SQLAlchemy needs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# "database" or "memory"
STORAGE_BACKEND = os.getenv("NIGHTGUARD_STORAGE", "database").lower()

UPLOAD_DIR = os.getenv("NIGHTGUARD_UPLOAD_DIR", "./uploads")
MAX_UPLOAD_MB = int(os.getenv("NIGHTGUARD_MAX_UPLOAD_MB", "5"))
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024
ALLOWED_DOCUMENT_EXTENSIONS = (".jpg", ".jpeg", ".png", ".pdf")

SESSION_COOKIE_NAME = os.getenv("NIGHTGUARD_SESSION_COOKIE", "nightguard_session")
SESSION_TTL_HOURS = int(os.getenv("NIGHTGUARD_SESSION_TTL_HOURS", "24"))
SECURE_COOKIES = os.getenv("NIGHTGUARD_SECURE_COOKIES", "false").lower() == "true"

# Default admin created on startup when the user table is empty
ADMIN_USERNAME = os.getenv("NIGHTGUARD_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("NIGHTGUARD_ADMIN_PASSWORD", "adminpass")

LOG_LEVEL = os.getenv("NIGHTGUARD_LOG_LEVEL", "INFO").upper()

# Exposes raw exception messages in 500 responses
DEBUG = os.getenv("NIGHTGUARD_DEBUG", "false").lower() == "true"
