"""Shared HTTP client with connection pooling for all outbound requests."""

import logging
import threading
from typing import TYPE_CHECKING, Optional

import httpx

if TYPE_CHECKING:
    from core.app_config import AppConfig

logger = logging.getLogger(__name__)

_shared_client: Optional[httpx.Client] = None
_client_lock = threading.Lock()


def get_shared_client(config: "AppConfig | None" = None) -> httpx.Client:
    """Get or create a shared httpx.Client with connection pooling.

    Settings from ``config`` only apply when the client is first created.
    """
    global _shared_client
    with _client_lock:
        if _shared_client is None:
            if config:
                max_connections = config.http_max_connections
                keepalive = config.http_keepalive_connections
                http2 = config.http2
                user_agent = config.user_agent
                timeout = config.detect_timeout_seconds
            else:
                from config import (
                    DETECT_TIMEOUT_SECONDS, HTTP2_ENABLED, HTTP_KEEPALIVE_CONNECTIONS,
                    HTTP_MAX_CONNECTIONS, HTTP_USER_AGENT,
                )
                max_connections = HTTP_MAX_CONNECTIONS
                keepalive = HTTP_KEEPALIVE_CONNECTIONS
                http2 = HTTP2_ENABLED
                user_agent = HTTP_USER_AGENT
                timeout = DETECT_TIMEOUT_SECONDS
            _shared_client = httpx.Client(
                timeout=timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=keepalive,
                    max_connections=max_connections,
                    keepalive_expiry=30.0,
                ),
                headers={"User-Agent": user_agent} if user_agent else None,
                http2=http2,
            )
            logger.debug("Created shared HTTP client with connection pooling (http2=%s)", http2)
        return _shared_client


def close_shared_client():
    """Close the shared client. Call on app shutdown."""
    global _shared_client
    with _client_lock:
        if _shared_client is not None:
            _shared_client.close()
            _shared_client = None
            logger.debug("Closed shared HTTP client")
