"""Cloud Storage uploads and source-image downloads."""
import logging
import re
from typing import Any, Optional

import httpx
import requests
from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as google_auth_exceptions

from pixcraft.core.errors import DownstreamUnavailable, InvalidArgument

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_file_name(file_name: str) -> str:
    """Replace every character outside [A-Za-z0-9._-] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", file_name)


class StorageService:
    """Stores binary objects in a Cloud Storage bucket and exposes them publicly."""

    def __init__(self, bucket_name: str, project_id: Optional[str] = None, client: Any = None) -> None:
        self.bucket_name = bucket_name
        self.project_id = project_id
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            from google.cloud import storage

            self._client = storage.Client(project=self.project_id)
        return self._client

    def public_url(self, path: str) -> str:
        return f"https://storage.googleapis.com/{self.bucket_name}/{path}"

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> str:
        """Upload bytes, make the object public and return its URL.

        Args:
            path: Object name inside the bucket.
            data: Raw bytes to store.
            content_type: MIME type recorded on the object.
            metadata: Custom string metadata attached to the object.

        Returns:
            Public https URL of the stored object.

        Raises:
            DownstreamUnavailable: Cloud Storage rejected the upload or was unreachable.
        """
        bucket = self.client.bucket(self.bucket_name)
        blob = bucket.blob(path)
        if metadata:
            blob.metadata = {key: str(value) for key, value in metadata.items()}
        try:
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
        except (
            gcp_exceptions.GoogleAPIError,
            google_auth_exceptions.TransportError,
            requests.exceptions.RequestException,
        ) as exc:
            raise DownstreamUnavailable(f"Upload to {path} failed: {exc}") from exc
        url = self.public_url(path)
        logger.info("Uploaded %d bytes to %s", len(data), path)
        return url


class ImageDownloader:
    """Fetches source photos by URL."""

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.timeout = timeout
        self._transport = transport

    def download(self, url: str) -> bytes:
        """Download an image.

        Raises:
            InvalidArgument: The URL does not serve an image.
            DownstreamUnavailable: Network failure or non-2xx response.
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DownstreamUnavailable(
                f"Source image download failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise DownstreamUnavailable(f"Source image download failed: {exc}") from exc

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise InvalidArgument(f"imageUrl does not point to an image (content-type {content_type!r})")
        return response.content
