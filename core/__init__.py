"""Public core APIs for composition roots and external integrations."""

from core.app_config import AppConfig
from core.audio_format import AudioFormat, FormatDetectionResult
from core.episode_intake import EpisodeDraft, build_url_episode
from core.errors import DetectionError, HeadersTimeoutError, NetworkError, ValidationError
from core.feed_import import FeedImporter
from core.format_detector import FormatDetector, detect_audio_format
from core.http_client import close_shared_client, get_shared_client

__all__ = [
    "AppConfig",
    "AudioFormat",
    "FormatDetectionResult",
    "FormatDetector",
    "detect_audio_format",
    "EpisodeDraft",
    "build_url_episode",
    "FeedImporter",
    "DetectionError",
    "ValidationError",
    "NetworkError",
    "HeadersTimeoutError",
    "get_shared_client",
    "close_shared_client",
]
