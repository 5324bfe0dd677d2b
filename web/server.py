"""FastAPI application exposing format detection and episode intake."""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Query
from fastapi.responses import JSONResponse

from core.app_config import AppConfig
from core.episode_intake import build_url_episode
from core.errors import HeadersTimeoutError, NetworkError, ValidationError
from core.feed_import import FeedConfigError, FeedError, FeedImporter
from core.format_detector import FormatDetector
from core.http_client import close_shared_client

LOGGER = logging.getLogger(__name__)


def _error(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    body: Dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def create_app(
    config: Optional[AppConfig] = None,
    *,
    detector: Optional[FormatDetector] = None,
    importer: Optional[FeedImporter] = None,
) -> FastAPI:
    """Return a configured FastAPI application."""

    config = config or AppConfig.from_env()
    detector = detector or FormatDetector(config=config)
    importer = importer or FeedImporter(config=config, detector=detector)

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        close_shared_client()

    app = FastAPI(
        title="Episode Format Detector",
        description="Classify remote audio URLs and prepare episode records",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.detector = detector
    app.state.importer = importer

    @app.get("/healthz")
    def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/episode/detect")
    def detect_format(url: Optional[str] = Query(default=None)):
        if not url or not url.strip():
            return _error(400, "URL parameter is required")
        try:
            result = detector.detect(url)
        except ValidationError as error:
            return _error(400, str(error))
        except (NetworkError, HeadersTimeoutError) as error:
            LOGGER.error("Format detection failed for %s: %s", url, error)
            return _error(500, "Failed to detect audio format", str(error))
        return result.to_dict()

    @app.post("/api/episode/upload-url")
    def upload_url(payload: Dict[str, Any] = Body(...)):
        try:
            draft = build_url_episode(payload, detector)
        except ValidationError as error:
            return _error(400, str(error))
        return {"success": True, "episode": draft.to_dict()}

    @app.get("/api/episode/bot")
    def import_bot_feed():
        try:
            drafts = importer.import_feed()
        except FeedConfigError as error:
            return _error(500, str(error))
        except FeedError as error:
            LOGGER.error("Feed import failed: %s", error)
            return _error(500, "Failed to process feed", str(error))
        return {
            "success": True,
            "count": len(drafts),
            "episodes": [draft.to_dict() for draft in drafts],
        }

    return app


__all__ = ["create_app"]
