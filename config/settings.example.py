"""Example configuration file. Copy this to settings.py and fill in your values."""

import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory
BASE_DIR = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Secret management helpers
# ---------------------------------------------------------------------------
SECRET_FILE = Path(__file__).with_name("secret.json")


def _load_secrets() -> dict:
    """Load secrets from secret.json if present."""
    if not SECRET_FILE.exists():
        return {}
    try:
        with SECRET_FILE.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return {}


_secrets_cache: dict = {}
_secrets_mtime: float = 0


def _get_secret(key: str, default: str = "") -> str:
    """Read value from env first, then fall back to secret.json.

    The secrets file is re-read when its modification time changes, so a
    rotated key is picked up without restarting the server.
    """
    env_value = os.getenv(key)
    if env_value:
        return env_value

    global _secrets_cache, _secrets_mtime
    try:
        if SECRET_FILE.exists():
            mtime = SECRET_FILE.stat().st_mtime
            if mtime != _secrets_mtime or not _secrets_cache:
                _secrets_cache = _load_secrets()
                _secrets_mtime = mtime
        elif _secrets_cache:
            _secrets_cache = {}
            _secrets_mtime = 0
    except OSError:
        _secrets_cache = _load_secrets()

    return _secrets_cache.get(key, default) or default


def _get_int_env(key: str, default: int) -> int:
    """Safely get integer from environment variable."""
    try:
        value = os.getenv(key)
        if value is None:
            return default
        return int(value)
    except (ValueError, TypeError):
        logging.warning(f"Invalid value for {key}, using default: {default}")
        return default


def _get_float_env(key: str, default: float) -> float:
    """Safely get float from environment variable."""
    try:
        value = os.getenv(key)
        if value is None:
            return default
        return float(value)
    except (ValueError, TypeError):
        logging.warning(f"Invalid value for {key}, using default: {default}")
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database settings
DATABASE_PATH = os.getenv("DATABASE_PATH", str(BASE_DIR / "data" / "worksphere.db"))

# Public URLs used in emailed links and redirects
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:5000").rstrip("/")

# Session domains (one cookie + secret + table each)
SESSION_SECRET = _get_secret("SESSION_SECRET", "change-me-user")
SESSION_SECRET_COMPANY = _get_secret("SESSION_SECRET_COMPANY", "change-me-company")
SESSION_SECRET_ADMIN = _get_secret("SESSION_SECRET_ADMIN", "change-me-admin")
SESSION_TTL_HOURS = _get_int_env("SESSION_TTL_HOURS", 24)
COOKIE_SECURE = _get_bool_env("COOKIE_SECURE", False)

# Admin bearer tokens
JWT_SECRET = _get_secret("JWT_SECRET", "change-me-jwt")
ADMIN_TOKEN_TTL_HOURS = _get_int_env("ADMIN_TOKEN_TTL_HOURS", 24)

# Account security
VERIFICATION_TOKEN_TTL_MINUTES = _get_int_env("VERIFICATION_TOKEN_TTL_MINUTES", 60)
RESET_TOKEN_TTL_MINUTES = _get_int_env("RESET_TOKEN_TTL_MINUTES", 60)
MAX_FAILED_LOGINS = _get_int_env("MAX_FAILED_LOGINS", 5)
LOCKOUT_MINUTES = _get_int_env("LOCKOUT_MINUTES", 15)

# Google OAuth
GOOGLE_CLIENT_ID = _get_secret("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = _get_secret("GOOGLE_CLIENT_SECRET", "")

# Email settings ("smtp" sends, "console" only logs)
EMAIL_PROVIDER = os.getenv("EMAIL_PROVIDER", "console").lower()
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = _get_int_env("SMTP_PORT", 587)
EMAIL_USER = _get_secret("EMAIL_USER", "")
EMAIL_PASS = _get_secret("EMAIL_PASS", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", EMAIL_USER or "no-reply@worksphere.local")
EMAIL_MAX_CONCURRENCY = _get_int_env("EMAIL_MAX_CONCURRENCY", 4)

# Uploads
UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads"))
MAX_RESUME_SIZE = _get_int_env("MAX_RESUME_SIZE", 5 * 1024 * 1024)
MAX_PHOTO_SIZE = _get_int_env("MAX_PHOTO_SIZE", 5 * 1024 * 1024)
MAX_CERTIFICATE_SIZE = _get_int_env("MAX_CERTIFICATE_SIZE", 5 * 1024 * 1024)
MAX_LOGO_SIZE = _get_int_env("MAX_LOGO_SIZE", 5 * 1024 * 1024)
MAX_VIDEO_SIZE = _get_int_env("MAX_VIDEO_SIZE", 10 * 1024 * 1024)

# LLM settings (about-me drafting and career suggestions)
LLM_PROVIDER = _get_secret("LLM_PROVIDER", "deepseek").lower()
DEEPSEEK_API_KEY = _get_secret("DEEPSEEK_API_KEY", "")
OPENAI_API_KEY = _get_secret("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = _get_secret("ANTHROPIC_API_KEY", "")
MODEL_NAME = os.getenv("MODEL_NAME", "deepseek-chat")
LLM_TIMEOUT_SECONDS = _get_float_env("LLM_TIMEOUT_SECONDS", 30.0)
LLM_MIN_CALL_INTERVAL = _get_float_env("LLM_MIN_CALL_INTERVAL", 1.0)

# Seed admin account
ADMIN_SEED_EMAIL = os.getenv("ADMIN_SEED_EMAIL", "admin@gmail.com")
ADMIN_SEED_PASSWORD = _get_secret("ADMIN_SEED_PASSWORD", "admin123")

# Logging settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
VERBOSE = os.getenv("VERBOSE", "false").lower() == "true"
