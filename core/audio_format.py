"""Audio format table and header-based classification helpers.

Everything here is pure: callers supply the URL and whatever response headers
they observed, and get back a :class:`FormatDetectionResult`. The network side
lives in :mod:`core.format_detector`.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from urllib.parse import urlsplit


class AudioFormat(str, Enum):
    MP3 = "mp3"
    WAV = "wav"
    OGG = "ogg"
    FLAC = "flac"
    AAC = "aac"
    M4A = "m4a"
    WEBM = "webm"
    OPUS = "opus"
    M3U8 = "m3u8"
    UNKNOWN = "unknown"


# Scan order matters: the first format whose list matches wins.
AUDIO_FORMAT_MIME_TYPES = MappingProxyType({
    AudioFormat.MP3: ("audio/mpeg", "audio/mp3"),
    AudioFormat.WAV: ("audio/wav", "audio/x-wav"),
    AudioFormat.OGG: ("audio/ogg", "application/ogg"),
    AudioFormat.FLAC: ("audio/flac",),
    AudioFormat.AAC: ("audio/aac", "audio/aacp"),
    AudioFormat.M4A: ("audio/mp4", "audio/x-m4a"),
    AudioFormat.WEBM: ("audio/webm",),
    AudioFormat.OPUS: ("audio/opus",),
    AudioFormat.M3U8: ("application/vnd.apple.mpegurl", "application/x-mpegurl"),
})

_EXTENSION_FORMATS = MappingProxyType({fmt.value: fmt for fmt in AUDIO_FORMAT_MIME_TYPES})

M3U8_SUFFIX = ".m3u8"
M3U8_MIME_MARKER = "mpegurl"


@dataclass(frozen=True)
class FormatDetectionResult:
    """Outcome of a single detection call.

    ``mime_type`` is ``None`` when the response carried no content-type
    header. ``success`` is always ``True`` on a returned result; failures are
    raised, never reported through this object.
    """

    url: str
    format: AudioFormat
    mime_type: str | None = None
    content_length: int | None = None
    is_stream: bool = False
    success: bool = True

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "format": self.format.value,
            "mimeType": self.mime_type,
            "contentLength": self.content_length,
            "isStream": self.is_stream,
            "success": self.success,
        }


def url_path(url: str) -> str:
    """Return the path component of ``url`` without query or fragment."""
    try:
        return urlsplit(url or "").path
    except ValueError:
        return ""


def url_extension(url: str) -> str:
    """Return the lower-cased text after the last dot of the URL path."""
    path = url_path(url)
    _, dot, ext = path.rpartition(".")
    if not dot:
        return ""
    return ext.lower()


def is_m3u8(url: str, mime_type: str | None = None) -> bool:
    if url_path(url).lower().endswith(M3U8_SUFFIX):
        return True
    return bool(mime_type) and M3U8_MIME_MARKER in mime_type.lower()


def format_from_mime_type(mime_type: str | None) -> AudioFormat | None:
    """Return the first non-HLS format whose MIME list is contained in ``mime_type``."""
    if not mime_type:
        return None
    value = mime_type.lower()
    for fmt, candidates in AUDIO_FORMAT_MIME_TYPES.items():
        if fmt is AudioFormat.M3U8:
            continue
        if any(candidate in value for candidate in candidates):
            return fmt
    return None


def format_from_extension(url: str) -> AudioFormat | None:
    return _EXTENSION_FORMATS.get(url_extension(url))


def parse_content_length(value) -> int | None:
    """Parse a content-length header; anything but a plain integer yields ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def classify(url: str, mime_type: str | None = None, content_length=None) -> FormatDetectionResult:
    """Classify ``url`` from its suffix and the observed response headers.

    Priority, first match wins: HLS playlist (suffix or ``mpegurl`` type),
    MIME table, URL extension, then ``unknown``.
    """
    mime_type = (mime_type or "").strip() or None
    length = parse_content_length(content_length)

    if is_m3u8(url, mime_type):
        return FormatDetectionResult(
            url=url,
            format=AudioFormat.M3U8,
            mime_type=mime_type,
            content_length=length,
            is_stream=True,
        )

    fmt = format_from_mime_type(mime_type) or format_from_extension(url) or AudioFormat.UNKNOWN
    return FormatDetectionResult(
        url=url,
        format=fmt,
        mime_type=mime_type,
        content_length=length,
        is_stream=False,
    )


def guess_mime_type(url: str) -> str:
    """Return the MIME type implied by the URL extension, or an empty string."""
    ext = url_extension(url)
    if not ext:
        return ""
    guessed, _ = mimetypes.guess_type(f"file.{ext}", strict=False)
    if guessed:
        return guessed
    fmt = _EXTENSION_FORMATS.get(ext)
    if fmt is not None:
        return AUDIO_FORMAT_MIME_TYPES[fmt][0]
    return ""
