"""Tests for FormatDetector with an in-memory header fetcher."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.audio_format import AudioFormat
from core.errors import HeadersTimeoutError, NetworkError, ValidationError
from core.format_detector import FormatDetector
from core.header_fetcher import HeaderResponse


class FakeRequest:
    def __init__(self, response: HeaderResponse | None = None, error: Exception | None = None):
        self._response = response
        self._error = error
        self.abort_calls = 0
        self.wait_timeouts: list[float] = []

    def wait(self, timeout: float) -> HeaderResponse:
        self.wait_timeouts.append(timeout)
        if self._error is not None:
            raise self._error
        return self._response

    def abort(self) -> None:
        self.abort_calls += 1


class FakeFetcher:
    def __init__(self, request: FakeRequest):
        self.request = request
        self.opened: list[str] = []

    def open(self, url: str) -> FakeRequest:
        self.opened.append(url)
        return self.request


def _detector_for(headers=None, status_code=200, error=None, timeout=10.0):
    request = FakeRequest(HeaderResponse(status_code, headers or {}), error=error)
    fetcher = FakeFetcher(request)
    return FormatDetector(fetcher=fetcher, timeout=timeout), fetcher, request


class TestDetectScenarios:
    def test_hls_playlist(self):
        detector, fetcher, request = _detector_for({"content-type": "application/vnd.apple.mpegurl"})
        result = detector.detect("https://example.com/show/playlist.m3u8")

        assert result.format == AudioFormat.M3U8
        assert result.is_stream is True
        assert result.mime_type == "application/vnd.apple.mpegurl"
        assert fetcher.opened == ["https://example.com/show/playlist.m3u8"]
        assert request.abort_calls == 1

    def test_m3u8_suffix_regardless_of_content_type(self):
        detector, _, _ = _detector_for({"content-type": "text/plain"})
        result = detector.detect("https://example.com/a/Stream.M3U8?sig=1")
        assert result.format == AudioFormat.M3U8
        assert result.is_stream is True

    def test_extensionless_url_uses_content_type_and_length(self):
        detector, _, request = _detector_for({"content-type": "audio/ogg", "content-length": "4096"})
        result = detector.detect("https://cdn.example.com/track123")

        assert result.format == AudioFormat.OGG
        assert result.content_length == 4096
        assert result.is_stream is False
        assert request.abort_calls == 1

    def test_missing_content_type_falls_back_to_extension(self):
        detector, _, _ = _detector_for({})
        result = detector.detect("https://cdn.example.com/track.m4a")

        assert result.format == AudioFormat.M4A
        assert result.mime_type is None
        assert result.is_stream is False
        assert result.content_length is None

    def test_mime_parameters_are_tolerated(self):
        detector, _, _ = _detector_for({"content-type": 'audio/mpeg; codecs="mp3"'})
        assert detector.detect("https://cdn.example.com/stream").format == AudioFormat.MP3

    def test_unknown_still_aborts_and_succeeds(self):
        detector, _, request = _detector_for({"content-type": "text/html", "content-length": "n/a"})
        result = detector.detect("https://cdn.example.com/page.xyz")

        assert result.format == AudioFormat.UNKNOWN
        assert result.success is True
        assert result.content_length is None
        assert request.abort_calls == 1

    def test_error_status_is_still_classified(self):
        detector, _, _ = _detector_for({"content-type": "text/html"}, status_code=404)
        assert detector.detect("https://cdn.example.com/missing.wav").format == AudioFormat.WAV


class TestDetectFailures:
    def test_timeout_aborts_once_and_raises(self):
        error = HeadersTimeoutError("Request timeout after 10s", timeout=10.0)
        detector, _, request = _detector_for(error=error)

        with pytest.raises(TimeoutError):
            detector.detect("https://slow.example.com/track.mp3")
        assert request.abort_calls == 1
        assert request.wait_timeouts == [10.0]

    def test_network_error_propagates_with_cause(self):
        cause = ConnectionResetError("reset by peer")
        detector, _, request = _detector_for(error=NetworkError("reset by peer", cause=cause))

        with pytest.raises(NetworkError) as excinfo:
            detector.detect("https://down.example.com/track.mp3")
        assert excinfo.value.cause is cause
        assert request.abort_calls == 1

    @pytest.mark.parametrize("url", ["", "   ", None, "ftp://files.example.com/a.mp3", "example.com/a.mp3"])
    def test_invalid_urls_never_reach_the_network(self, url):
        detector, fetcher, _ = _detector_for({})
        with pytest.raises(ValidationError):
            detector.detect(url)
        assert fetcher.opened == []


def test_timeout_defaults_from_config():
    from core.app_config import AppConfig

    detector = FormatDetector(config=AppConfig(detect_timeout_seconds=3.5), fetcher=FakeFetcher(FakeRequest()))
    assert detector.timeout == 3.5


def test_each_call_opens_its_own_request():
    detector, fetcher, request = _detector_for({"content-type": "audio/wav"})
    detector.detect("https://a.example/1")
    detector.detect("https://a.example/2")
    assert fetcher.opened == ["https://a.example/1", "https://a.example/2"]
    assert request.abort_calls == 2


def test_module_level_detect_uses_default_detector():
    from unittest.mock import patch

    from core import format_detector

    detector, fetcher, _ = _detector_for({"content-type": "audio/flac"})
    with patch.object(format_detector, "_default_detector", detector):
        result = format_detector.detect_audio_format("https://cdn.example.com/x")
    assert result.format == AudioFormat.FLAC
    assert fetcher.opened == ["https://cdn.example.com/x"]


def test_surrounding_whitespace_is_stripped_for_the_fetch():
    detector, fetcher, request = _detector_for({"content-type": "audio/mpeg"})
    result = detector.detect("  https://cdn.example.com/a.mp3 ")

    assert fetcher.opened == ["https://cdn.example.com/a.mp3"]
    assert result.url == "  https://cdn.example.com/a.mp3 "
    assert result.format == AudioFormat.MP3
    assert request.abort_calls == 1


class PerUrlFetcher:
    def __init__(self, headers_by_url):
        self.requests = {url: FakeRequest(HeaderResponse(200, headers)) for url, headers in headers_by_url.items()}
        self._barrier = threading.Barrier(len(headers_by_url))

    def open(self, url: str) -> FakeRequest:
        self._barrier.wait(timeout=5)
        return self.requests[url]


def test_concurrent_detects_are_independent():
    headers_by_url = {
        "https://a.example/1": {"content-type": "audio/ogg", "content-length": "1"},
        "https://a.example/2": {"content-type": "audio/flac", "content-length": "2"},
        "https://a.example/3.m3u8": {"content-type": "text/plain"},
        "https://a.example/4.wav": {},
    }
    fetcher = PerUrlFetcher(headers_by_url)
    detector = FormatDetector(fetcher=fetcher, timeout=1.0)

    with ThreadPoolExecutor(max_workers=len(headers_by_url)) as pool:
        results = dict(zip(headers_by_url, pool.map(detector.detect, headers_by_url)))

    assert results["https://a.example/1"].format == AudioFormat.OGG
    assert results["https://a.example/1"].content_length == 1
    assert results["https://a.example/2"].format == AudioFormat.FLAC
    assert results["https://a.example/2"].content_length == 2
    assert results["https://a.example/3.m3u8"].is_stream is True
    assert results["https://a.example/4.wav"].format == AudioFormat.WAV
    assert all(r.url == url for url, r in results.items())
    assert [req.abort_calls for req in fetcher.requests.values()] == [1, 1, 1, 1]
