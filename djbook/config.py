import os
import warnings


def _flag(name: str, default: str) -> bool:
    return (os.getenv(name) or default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DJBOOK_DB") or "sqlite+aiosqlite:///./djbook.db"
SQL_ECHO = _flag("DJBOOK_SQL_ECHO", "false")
AUTO_CREATE_TABLES = _flag("DJBOOK_AUTO_CREATE", "true")

JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    warnings.warn(
        "JWT_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    JWT_SECRET = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - dev fallback only
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES") or "1440")

# optional in dev, required if you want events / cross-process locks
RABBIT_URL = os.getenv("RABBIT_URL")
REDIS_URL = os.getenv("REDIS_URL")
LOCK_TIMEOUT_SECONDS = float(os.getenv("DJBOOK_LOCK_TIMEOUT") or "10")

PLATFORM_TIMEZONE = os.getenv("DJBOOK_TIMEZONE") or "Asia/Kolkata"
ENFORCE_PENDING_TRANSITIONS = _flag("DJBOOK_ENFORCE_PENDING", "true")
SEARCH_RADIUS_KM = float(os.getenv("DJBOOK_SEARCH_RADIUS_KM") or "50")

ADMIN_EMAIL = os.getenv("DJBOOK_ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("DJBOOK_ADMIN_PASSWORD")

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
