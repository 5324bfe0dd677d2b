"""Application configuration as an injectable dataclass."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return float(default)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        return int(default)


@dataclass
class AppConfig:
    """Application configuration loaded from environment variables."""

    # Detection
    detect_timeout_seconds: float = 10.0

    # HTTP
    http_max_connections: int = 20
    http_keepalive_connections: int = 10
    http2: bool = True
    user_agent: str = "episode-format-detector/1.0"

    # Feed import
    feed_url: str = ""
    feed_owner_id: str = ""
    feed_album_id: str = ""

    # Server
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @property
    def feed_configured(self) -> bool:
        return bool(self.feed_url and self.feed_owner_id and self.feed_album_id)

    @staticmethod
    def from_env() -> "AppConfig":
        """Load config from .env file and environment variables."""
        load_dotenv()
        return AppConfig(
            detect_timeout_seconds=_float_env("DETECT_TIMEOUT_SECONDS", 10.0),
            http_max_connections=_int_env("HTTP_MAX_CONNECTIONS", 20),
            http_keepalive_connections=_int_env("HTTP_KEEPALIVE_CONNECTIONS", 10),
            http2=os.getenv("HTTP2_ENABLED", "true").strip().lower() in {"1", "true", "yes", "on"},
            user_agent=os.getenv("HTTP_USER_AGENT", "episode-format-detector/1.0").strip(),
            feed_url=os.getenv("BOT_NEW_JSON_URL", "").strip(),
            feed_owner_id=os.getenv("BOT_OWNER_ID", "").strip(),
            feed_album_id=os.getenv("BOT_ALBUM_ID", "").strip(),
            server_host=os.getenv("HOST", "127.0.0.1").strip() or "127.0.0.1",
            server_port=_int_env("PORT", 8000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE", "").strip(),
        )
