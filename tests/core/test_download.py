"""
Unit tests for download module.

Tests fetch functionality with mocked network requests.
"""

import pytest
import requests
import responses

from torkit.core.download import (
    DownloadProgress,
    FetchError,
    fetch_bytes,
    fetch_text,
    format_progress,
)

BUNDLE_URL = "https://example.com/tor-expert-bundle-linux-x86_64-14.0.4.tar.gz"


class TestFetchBytes:
    """Test fetch_bytes function."""

    @responses.activate
    def test_fetch_success(self):
        """Test the full body is returned."""
        body = b"bundle contents" * 1000
        responses.add(responses.GET, BUNDLE_URL, body=body, status=200)

        assert fetch_bytes(BUNDLE_URL) == body

    @responses.activate
    def test_fetch_empty_body(self):
        """Test an empty body is a successful fetch."""
        responses.add(responses.GET, BUNDLE_URL, body=b"", status=200)

        assert fetch_bytes(BUNDLE_URL) == b""

    @responses.activate
    def test_http_error_status(self):
        """Test non-success status raises FetchError."""
        responses.add(responses.GET, BUNDLE_URL, status=404)

        with pytest.raises(FetchError, match="404"):
            fetch_bytes(BUNDLE_URL)

    @responses.activate
    def test_server_error(self):
        """Test server errors are not retried."""
        responses.add(responses.GET, BUNDLE_URL, status=500)

        with pytest.raises(FetchError):
            fetch_bytes(BUNDLE_URL)

        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error(self):
        """Test transport failures raise FetchError."""
        responses.add(
            responses.GET,
            BUNDLE_URL,
            body=requests.exceptions.ConnectionError("connection refused"),
        )

        with pytest.raises(FetchError, match="connection refused"):
            fetch_bytes(BUNDLE_URL)

    def test_empty_url(self):
        """Test empty URL raises ValueError."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            fetch_bytes("")

    @responses.activate
    def test_progress_callback(self):
        """Test progress reaches completion when size is known."""
        body = b"x" * 50000
        responses.add(
            responses.GET,
            BUNDLE_URL,
            body=body,
            status=200,
            headers={"Content-Length": str(len(body))},
        )

        updates = []
        fetch_bytes(BUNDLE_URL, progress_callback=updates.append)

        assert updates
        final = updates[-1]
        assert final.bytes_downloaded == len(body)
        assert final.total_bytes == len(body)
        assert final.percentage == pytest.approx(100.0)


class TestFetchText:
    """Test fetch_text function."""

    @responses.activate
    def test_fetch_text(self):
        """Test body is decoded as text."""
        responses.add(
            responses.GET,
            "https://example.com/index/",
            body="<html>listing</html>",
            status=200,
            content_type="text/html",
        )

        assert fetch_text("https://example.com/index/") == "<html>listing</html>"

    @responses.activate
    def test_fetch_text_error(self):
        """Test non-success status raises FetchError."""
        responses.add(responses.GET, "https://example.com/index/", status=503)

        with pytest.raises(FetchError):
            fetch_text("https://example.com/index/")

    def test_empty_url(self):
        """Test empty URL raises ValueError."""
        with pytest.raises(ValueError):
            fetch_text("")


class TestFormatProgress:
    """Test format_progress function."""

    def test_known_size(self):
        """Test formatting with a known total size."""
        progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)

        assert format_progress(progress) == "50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s"

    def test_unknown_size(self):
        """Test formatting without a total size."""
        progress = DownloadProgress(2097152, 2097152, 0, 1048576, 0)

        assert format_progress(progress) == "2.0 MB at 1.0 MB/s"

    def test_str_uses_format(self):
        """Test DownloadProgress string form."""
        progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)

        assert str(progress) == format_progress(progress)
