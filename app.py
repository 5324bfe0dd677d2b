"""Episode Format Detector: HTTP API entry point"""

import sys
import os
import logging
sys.path.insert(0, os.path.dirname(__file__))

import uvicorn

from config import LOG_LEVEL, LOG_FILE
from core.app_config import AppConfig
from web import create_app


logger = logging.getLogger(__name__)


def _configure_logging():
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    handlers = [logging.StreamHandler()]
    if LOG_FILE:
        handlers.append(logging.FileHandler(LOG_FILE, encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=handlers,
    )


def main():
    _configure_logging()
    config = AppConfig.from_env()
    logger.info("Starting Episode Format Detector on %s:%s", config.server_host, config.server_port)
    uvicorn.run(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
        log_level=LOG_LEVEL.lower(),
    )
    logger.info("Exiting Episode Format Detector")
    return 0


if __name__ == "__main__":
    sys.exit(main())
