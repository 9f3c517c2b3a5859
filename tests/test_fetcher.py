"""Tests for ImageFetcher."""

from io import BytesIO

import pytest
import requests
from PIL import Image

from image_alternatives.errors import FetchFailed
from image_alternatives.fetcher import ImageFetcher


class FakeResponse:
    def __init__(self, content=b"", status_code=200, headers=None):
        self.content = content
        self.status_code = status_code
        self.headers = headers or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Client Error")


def png_bytes(size=(20, 10), color=(10, 200, 30)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_image_fetcher_initialization():
    """Test ImageFetcher defaults."""
    fetcher = ImageFetcher()
    assert fetcher.timeout == 10.0
    assert "Mozilla" in fetcher.user_agent


def test_fetch_decodes_image(monkeypatch):
    """Test a successful download is decoded to grayscale."""
    calls = []

    def fake_get(url, headers, timeout):
        calls.append((url, headers, timeout))
        return FakeResponse(png_bytes(), headers={"Content-Type": "image/png"})

    monkeypatch.setattr(requests, "get", fake_get)

    sample = ImageFetcher(timeout=3.0).fetch("http://example.com/a.png")

    assert (sample.width, sample.height) == (20, 10)
    url, headers, timeout = calls[0]
    assert url == "http://example.com/a.png"
    assert headers["Referer"] == "http://example.com/a.png"
    assert timeout == 3.0


def test_fetcher_is_callable(monkeypatch):
    """Test the fetcher can be passed where a fetch callable is expected."""
    monkeypatch.setattr(requests, "get", lambda url, headers, timeout: FakeResponse(png_bytes()))
    sample = ImageFetcher()("http://example.com/a.png")
    assert sample.width == 20


def test_fetch_network_error(monkeypatch):
    """Test connection errors become FetchFailed."""
    def fake_get(url, headers, timeout):
        raise requests.exceptions.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "get", fake_get)

    with pytest.raises(FetchFailed, match="connection refused") as exc_info:
        ImageFetcher().fetch("http://example.com/a.png")
    assert exc_info.value.url == "http://example.com/a.png"


def test_fetch_http_error(monkeypatch):
    """Test error status codes become FetchFailed."""
    monkeypatch.setattr(requests, "get", lambda url, headers, timeout: FakeResponse(status_code=404))

    with pytest.raises(FetchFailed, match="404"):
        ImageFetcher().fetch("http://example.com/missing.png")


def test_fetch_undecodable_content(monkeypatch):
    """Test non-image content becomes FetchFailed."""
    monkeypatch.setattr(
        requests, "get", lambda url, headers, timeout: FakeResponse(b"<html></html>", headers={"Content-Type": "text/html"})
    )

    with pytest.raises(FetchFailed, match="Failed to decode"):
        ImageFetcher().fetch("http://example.com/page.html")


def test_load_local_file(tmp_path):
    """Test loading a local image."""
    img_path = tmp_path / "local.jpg"
    Image.new("RGB", (30, 40), color=(128, 128, 128)).save(img_path)

    sample = ImageFetcher().load(img_path)
    assert (sample.width, sample.height) == (30, 40)


def test_load_missing_file(tmp_path):
    """Test a missing file becomes FetchFailed."""
    with pytest.raises(FetchFailed, match="Image not found"):
        ImageFetcher().load(tmp_path / "missing.png")
