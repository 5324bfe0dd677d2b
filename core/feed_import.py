"""Imports episodes from a remote JSON feed of externally hosted media."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import httpx

from core.audio_format import guess_mime_type, is_m3u8
from core.episode_intake import EpisodeDraft, classify_best_effort, coerce_duration, intake_format_from_extension
from core.errors import DetectionError, ValidationError
from core.format_detector import FormatDetector
from core.http_client import get_shared_client

if TYPE_CHECKING:
    from core.app_config import AppConfig

logger = logging.getLogger(__name__)


class FeedError(DetectionError):
    """The feed could not be fetched or was not the expected JSON shape."""


class FeedConfigError(FeedError):
    """Feed URL, owner or album is not configured."""


@dataclass(frozen=True)
class FeedEntry:
    title: str
    url: str
    file_size: int = 0
    duration: int = 0


def pick_preferred_file(files) -> Optional[dict]:
    """Return the first HLS playlist in ``files``, else the first file with a URL."""
    candidates = [f for f in files or [] if isinstance(f, dict) and isinstance(f.get("url"), str) and f["url"]]
    if not candidates:
        return None
    for item in candidates:
        if item["url"].lower().endswith(".m3u8"):
            return item
    return candidates[0]


def parse_entries(payload) -> list[FeedEntry]:
    if not isinstance(payload, dict) or not isinstance(payload.get("subCards"), list):
        raise FeedError("Feed payload is missing a 'subCards' list.")

    entries = []
    for card in payload["subCards"]:
        if not isinstance(card, dict):
            continue
        title = str(card.get("title") or "").strip()
        chosen = pick_preferred_file(card.get("externalVideoFiles"))
        if not title or chosen is None:
            logger.warning("Skipping feed card without title or playable file: %r", card.get("title"))
            continue
        metadata = card.get("videoMetadata") if isinstance(card.get("videoMetadata"), dict) else {}
        try:
            duration = coerce_duration(metadata.get("playTime"))
        except ValidationError:
            duration = 0
        try:
            file_size = int(chosen.get("fileSize") or 0)
        except (TypeError, ValueError):
            file_size = 0
        entries.append(FeedEntry(title=title, url=chosen["url"], file_size=file_size, duration=duration))
    return entries


class FeedImporter:
    """Fetches a feed and turns each card into a published episode draft."""

    def __init__(
        self,
        config: "AppConfig | None" = None,
        detector: Optional[FormatDetector] = None,
        feed_url=None,
        owner_id=None,
        album_id=None,
    ):
        if config:
            self.feed_url = feed_url or config.feed_url
            self.owner_id = owner_id or config.feed_owner_id
            self.album_id = album_id or config.feed_album_id
        else:
            from config import BOT_ALBUM_ID, BOT_NEW_JSON_URL, BOT_OWNER_ID
            self.feed_url = feed_url or BOT_NEW_JSON_URL
            self.owner_id = owner_id or BOT_OWNER_ID
            self.album_id = album_id or BOT_ALBUM_ID
        self._config = config
        self.detector = detector or FormatDetector(config=config)

    def fetch_feed(self, feed_url: str) -> dict:
        client = get_shared_client(self._config)
        logger.debug("Feed request -> %s", feed_url)
        try:
            resp = client.get(feed_url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise FeedError(f"Feed request failed: {e}") from e
        try:
            return resp.json()
        except ValueError as e:
            raise FeedError(f"Feed response was not valid JSON: {e}") from e

    def _draft_for(self, entry: FeedEntry) -> EpisodeDraft:
        fmt = intake_format_from_extension(entry.url)
        if fmt is not None:
            fields = {
                "format": fmt.value,
                "mime_type": guess_mime_type(entry.url),
                "file_size": entry.file_size,
                "is_stream": is_m3u8(entry.url),
            }
        else:
            fields = classify_best_effort(entry.url, self.detector)
            fields["file_size"] = entry.file_size or fields["file_size"]
        return EpisodeDraft(
            title=entry.title,
            original_name=entry.title,
            blob_url=entry.url,
            status="published",
            duration=entry.duration,
            owner_id=self.owner_id,
            album_id=self.album_id or None,
            **fields,
        )

    def import_feed(self, feed_url=None) -> list[EpisodeDraft]:
        feed_url = feed_url or self.feed_url
        if not feed_url or not self.owner_id or not self.album_id:
            logger.error(
                "Feed import misconfigured: url=%r owner=%r album=%r",
                feed_url, self.owner_id, self.album_id,
            )
            raise FeedConfigError("Missing required environment variables")

        entries = parse_entries(self.fetch_feed(feed_url))
        drafts = [self._draft_for(entry) for entry in entries]
        logger.info("Imported %d episode(s) from %s", len(drafts), feed_url)
        return drafts
