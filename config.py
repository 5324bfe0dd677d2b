import os
from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return float(default)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return int(default)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Format detection
DETECT_TIMEOUT_SECONDS = _env_float("DETECT_TIMEOUT_SECONDS", 10.0)

# Shared HTTP client
HTTP_MAX_CONNECTIONS = _env_int("HTTP_MAX_CONNECTIONS", 20)
HTTP_KEEPALIVE_CONNECTIONS = _env_int("HTTP_KEEPALIVE_CONNECTIONS", 10)
HTTP2_ENABLED = _env_bool("HTTP2_ENABLED", True)
HTTP_USER_AGENT = os.getenv("HTTP_USER_AGENT", "episode-format-detector/1.0").strip()

# Feed import
BOT_NEW_JSON_URL = os.getenv("BOT_NEW_JSON_URL", "").strip()
BOT_OWNER_ID = os.getenv("BOT_OWNER_ID", "").strip()
BOT_ALBUM_ID = os.getenv("BOT_ALBUM_ID", "").strip()

# Web server
SERVER_HOST = os.getenv("HOST", "127.0.0.1").strip() or "127.0.0.1"
SERVER_PORT = _env_int("PORT", 8000)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "").strip()
