"""Environment-driven settings."""

import os

DEFAULT_DATABASE_URL = "sqlite://"
DEFAULT_SESSION_COOKIE = "cafe_session"


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_database_url() -> str:
    """Database URL, in-memory SQLite unless overridden."""
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_session_cookie_name() -> str:
    return os.getenv("SESSION_COOKIE_NAME", DEFAULT_SESSION_COOKIE)


def get_session_ttl_hours() -> int:
    return int(os.getenv("SESSION_TTL_HOURS", "24"))


def session_cookie_secure() -> bool:
    return _flag("SESSION_COOKIE_SECURE", False)


def seed_menu_enabled() -> bool:
    return _flag("SEED_MENU", True)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_kitchen_credentials():
    """Phone/password pair for the bootstrap kitchen account, if configured."""
    phone = os.getenv("KITCHEN_PHONE")
    password = os.getenv("KITCHEN_PASSWORD")
    if not phone or not password:
        return None
    return phone, password


def get_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def get_port() -> int:
    return int(os.getenv("PORT", "8000"))
