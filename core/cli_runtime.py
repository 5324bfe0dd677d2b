"""Headless CLI runtime wiring for the episode format detector."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from core.app_config import AppConfig
from core.errors import DetectionError
from core.feed_import import FeedImporter
from core.format_detector import FormatDetector
from core.http_client import close_shared_client


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Episode audio format detector")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    sub = parser.add_subparsers(dest="command", required=True)

    p_detect = sub.add_parser("detect", help="Detect the audio format behind a URL")
    p_detect.add_argument("url", help="Remote audio URL")

    p_feed = sub.add_parser("import-feed", help="Import episodes from the configured JSON feed")
    p_feed.add_argument("--feed-url", default=None, help="Override BOT_NEW_JSON_URL")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None, help="Bind address")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port")
    return parser


def _configure_logging(level_name: str):
    logging.basicConfig(
        level=getattr(logging, str(level_name or "").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def cmd_detect(config: AppConfig, url: str) -> int:
    """Print the detection result as JSON."""
    detector = FormatDetector(config=config)
    try:
        result = detector.detect(url)
    except DetectionError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def cmd_import_feed(config: AppConfig, feed_url: str | None = None) -> int:
    """Import the feed and print the prepared episodes."""
    importer = FeedImporter(config=config)
    try:
        drafts = importer.import_feed(feed_url)
    except DetectionError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(json.dumps([draft.to_dict() for draft in drafts], indent=2))
    print(f"[INFO] {len(drafts)} episode(s) prepared", file=sys.stderr)
    return 0


def cmd_serve(config: AppConfig, host: str | None = None, port: int | None = None) -> int:
    """Serve the HTTP API until interrupted."""
    import uvicorn

    from web import create_app

    uvicorn.run(
        create_app(config),
        host=host or config.server_host,
        port=port or config.server_port,
        log_level=str(config.log_level or "info").lower(),
    )
    return 0


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.log_level)
    config = AppConfig.from_env()

    try:
        if args.command == "detect":
            return cmd_detect(config, args.url)
        if args.command == "import-feed":
            return cmd_import_feed(config, args.feed_url)
        if args.command == "serve":
            return cmd_serve(config, args.host, args.port)
        parser.error(f"Unknown command: {args.command}")
        return 2
    finally:
        close_shared_client()
