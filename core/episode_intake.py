"""Builds episode drafts from externally hosted audio URLs.

Format detection is enrichment only: if the remote host cannot be reached
the draft is still produced, classified from the URL alone.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlsplit

from core.audio_format import AudioFormat, format_from_extension, guess_mime_type, is_m3u8, url_extension
from core.errors import DetectionError, ValidationError

if TYPE_CHECKING:
    from core.format_detector import FormatDetector

logger = logging.getLogger(__name__)

EPISODE_STATUSES = ("draft", "published")

# Video containers that episodes treat as audio-only.
_INTAKE_EXTENSION_ALIASES = {"mp4": AudioFormat.M4A}


@dataclass
class EpisodeDraft:
    title: str
    blob_url: str
    format: str = AudioFormat.UNKNOWN.value
    mime_type: str = ""
    file_size: int = 0
    is_stream: bool = False
    status: str = "draft"
    original_name: str = ""
    description: Optional[str] = None
    language: Optional[str] = None
    original_website: Optional[str] = None
    duration: int = 0
    owner_id: Optional[str] = None
    album_id: Optional[str] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    group_id: Optional[str] = None
    label_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "title": data["title"],
            "originalName": data["original_name"],
            "blobUrl": data["blob_url"],
            "format": data["format"],
            "mimeType": data["mime_type"],
            "fileSize": data["file_size"],
            "isStream": data["is_stream"],
            "status": data["status"],
            "description": data["description"],
            "language": data["language"],
            "originalWebsite": data["original_website"],
            "duration": data["duration"],
            "ownerId": data["owner_id"],
            "albumId": data["album_id"],
            "categoryId": data["category_id"],
            "subcategoryId": data["subcategory_id"],
            "groupId": data["group_id"],
            "labelIds": data["label_ids"],
        }


def coerce_duration(value) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValidationError("Invalid duration")
    try:
        return int(float(value))
    except (TypeError, ValueError):
        raise ValidationError("Invalid duration") from None


def validate_external_url(url) -> str:
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL and title are required")
    value = url.strip()
    try:
        parts = urlsplit(value)
    except ValueError:
        raise ValidationError("Invalid URL format") from None
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        raise ValidationError("Invalid URL format")
    return value


def _optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def intake_format_from_extension(url: str) -> Optional[AudioFormat]:
    return format_from_extension(url) or _INTAKE_EXTENSION_ALIASES.get(url_extension(url))


def classify_best_effort(url: str, detector: Optional["FormatDetector"]) -> dict:
    """Return format fields for ``url``; detection failures degrade to the URL suffix."""
    if detector is not None:
        try:
            result = detector.detect(url)
            fmt = result.format
            if fmt is AudioFormat.UNKNOWN:
                fmt = intake_format_from_extension(url) or fmt
            return {
                "format": fmt.value,
                "mime_type": result.mime_type or guess_mime_type(url),
                "file_size": result.content_length or 0,
                "is_stream": result.is_stream,
            }
        except DetectionError as e:
            logger.warning("Format detection failed for %s, falling back to URL suffix: %s", url, e)

    fmt = intake_format_from_extension(url) or AudioFormat.UNKNOWN
    return {
        "format": fmt.value,
        "mime_type": guess_mime_type(url),
        "file_size": 0,
        "is_stream": is_m3u8(url),
    }


def build_url_episode(payload: dict, detector: Optional["FormatDetector"] = None) -> EpisodeDraft:
    """Validate an upload-url payload and return the episode it describes."""
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    url = payload.get("url")
    title = payload.get("title")
    if not url or not isinstance(title, str) or not title.strip():
        raise ValidationError("URL and title are required")
    url = validate_external_url(url)

    status = str(payload.get("status") or "draft").strip().lower()
    if status not in EPISODE_STATUSES:
        raise ValidationError("Invalid status")

    label_ids = payload.get("labelIds") or []
    if not isinstance(label_ids, list):
        raise ValidationError("labelIds must be a list")

    fields = classify_best_effort(url, detector)
    draft = EpisodeDraft(
        title=title.strip(),
        original_name=title.strip(),
        blob_url=url,
        status=status,
        description=_optional_text(payload.get("description")),
        language=_optional_text(payload.get("language")),
        original_website=_optional_text(payload.get("originalWebsite")),
        duration=coerce_duration(payload.get("duration", 0)),
        album_id=_optional_text(payload.get("albumId")),
        category_id=_optional_text(payload.get("categoryId")),
        subcategory_id=_optional_text(payload.get("subcategoryId")),
        group_id=_optional_text(payload.get("groupId")),
        label_ids=[str(item) for item in label_ids],
        **fields,
    )
    logger.info("Prepared URL episode %r (format=%s)", draft.title, draft.format)
    return draft
