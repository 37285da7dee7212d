"""Tests for StorageService, ImageDownloader and file name sanitisation."""
from unittest.mock import MagicMock

import httpx
import pytest
import requests
from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as google_auth_exceptions

from pixcraft.core.errors import DownstreamUnavailable, InvalidArgument
from pixcraft.services.storage import ImageDownloader, StorageService, sanitize_file_name


class TestSanitizeFileName:
    def test_keeps_safe_characters(self) -> None:
        assert sanitize_file_name("photo-01_final.JPG") == "photo-01_final.JPG"

    def test_replaces_unsafe_characters(self) -> None:
        assert sanitize_file_name("my photo (1).jpg") == "my_photo__1_.jpg"

    def test_replaces_path_separators(self) -> None:
        assert sanitize_file_name("../etc/passwd") == ".._etc_passwd"


class TestStorageService:
    def _service(self) -> tuple[StorageService, MagicMock]:
        client = MagicMock()
        return StorageService(bucket_name="test-bucket", client=client), client

    def test_returns_public_url(self) -> None:
        svc, _ = self._service()
        url = svc.upload("generated/u1/g1/beach_0.jpg", b"data", "image/jpeg")
        assert url == "https://storage.googleapis.com/test-bucket/generated/u1/g1/beach_0.jpg"

    def test_uploads_and_makes_public(self) -> None:
        svc, client = self._service()
        svc.upload("a/b.jpg", b"data", "image/jpeg", {"userId": "u1", "variationIndex": 2})  # type: ignore[dict-item]

        client.bucket.assert_called_once_with("test-bucket")
        blob = client.bucket.return_value.blob.return_value
        client.bucket.return_value.blob.assert_called_once_with("a/b.jpg")
        blob.upload_from_string.assert_called_once_with(b"data", content_type="image/jpeg")
        blob.make_public.assert_called_once()
        assert blob.metadata == {"userId": "u1", "variationIndex": "2"}

    def test_api_error_becomes_downstream_unavailable(self) -> None:
        svc, client = self._service()
        blob = client.bucket.return_value.blob.return_value
        blob.upload_from_string.side_effect = gcp_exceptions.Forbidden("no access")
        with pytest.raises(DownstreamUnavailable):
            svc.upload("a/b.jpg", b"data", "image/jpeg")

    def test_connection_error_becomes_downstream_unavailable(self) -> None:
        svc, client = self._service()
        blob = client.bucket.return_value.blob.return_value
        blob.upload_from_string.side_effect = requests.ConnectionError("connection reset")
        with pytest.raises(DownstreamUnavailable):
            svc.upload("a/b.jpg", b"data", "image/jpeg")

    def test_auth_transport_error_becomes_downstream_unavailable(self) -> None:
        svc, client = self._service()
        blob = client.bucket.return_value.blob.return_value
        blob.make_public.side_effect = google_auth_exceptions.TransportError("token refresh failed")
        with pytest.raises(DownstreamUnavailable):
            svc.upload("a/b.jpg", b"data", "image/jpeg")


def _downloader(handler) -> ImageDownloader:
    return ImageDownloader(timeout=5.0, transport=httpx.MockTransport(handler))


class TestImageDownloader:
    def test_returns_bytes(self) -> None:
        downloader = _downloader(
            lambda request: httpx.Response(200, content=b"img", headers={"content-type": "image/jpeg"})
        )
        assert downloader.download("https://example.com/a.jpg") == b"img"

    def test_http_error_is_unavailable(self) -> None:
        downloader = _downloader(lambda request: httpx.Response(404))
        with pytest.raises(DownstreamUnavailable):
            downloader.download("https://example.com/missing.jpg")

    def test_transport_error_is_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DownstreamUnavailable):
            _downloader(handler).download("https://example.com/a.jpg")

    def test_non_image_content_is_invalid_argument(self) -> None:
        downloader = _downloader(
            lambda request: httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})
        )
        with pytest.raises(InvalidArgument):
            downloader.download("https://example.com/page")
