"""Remote audio format detection with one header-only GET per call."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from core.audio_format import FormatDetectionResult, classify
from core.errors import ValidationError
from core.header_fetcher import HeaderFetcher, HttpxHeaderFetcher

if TYPE_CHECKING:
    from core.app_config import AppConfig

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http://", "https://")


class FormatDetector:
    """Classifies the audio container behind a URL without downloading it.

    The fetcher is injectable so tests can hand back canned headers. No
    retries are attempted here; errors propagate to the caller untouched.
    """

    def __init__(
        self,
        config: "AppConfig | None" = None,
        fetcher: Optional[HeaderFetcher] = None,
        timeout: Optional[float] = None,
    ):
        if config:
            default_timeout = config.detect_timeout_seconds
        else:
            from config import DETECT_TIMEOUT_SECONDS
            default_timeout = DETECT_TIMEOUT_SECONDS
        self.timeout = float(timeout if timeout is not None else default_timeout)
        self.fetcher = fetcher or HttpxHeaderFetcher(config=config)

    @staticmethod
    def validate_url(url) -> str:
        if not isinstance(url, str) or not url.strip():
            raise ValidationError("URL parameter is required")
        target = url.strip()
        if not target.lower().startswith(_ALLOWED_SCHEMES):
            raise ValidationError("Invalid URL format")
        return target

    def detect(self, url: str) -> FormatDetectionResult:
        """Return the format classification for ``url``.

        Raises ``NetworkError`` when the host cannot be reached and
        ``HeadersTimeoutError`` when no headers arrive within ``timeout``.
        """
        target = self.validate_url(url)
        request = self.fetcher.open(target)
        try:
            response = request.wait(self.timeout)
            result = classify(
                target,
                mime_type=response.header("content-type"),
                content_length=response.header("content-length"),
            )
        finally:
            request.abort()
        if target != url:
            # Report the URL as the caller gave it.
            result = replace(result, url=url)

        logger.debug(
            "Detected %s for %s (mime=%s length=%s stream=%s)",
            result.format.value,
            url,
            result.mime_type,
            result.content_length,
            result.is_stream,
        )
        return result


_default_detector: Optional[FormatDetector] = None
_default_lock = threading.Lock()


def get_default_detector() -> FormatDetector:
    global _default_detector
    with _default_lock:
        if _default_detector is None:
            _default_detector = FormatDetector()
        return _default_detector


def detect_audio_format(url: str) -> FormatDetectionResult:
    """Detect with the process-wide detector built from module config."""
    return get_default_detector().detect(url)
