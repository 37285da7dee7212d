"""UploadService: stores an original photo sent by the app."""
import asyncio
import base64
import binascii
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable

from pixcraft.core.errors import InvalidArgument, PermissionDenied
from pixcraft.core.logging import setup_logging
from pixcraft.models.generation import UploadImageRequest, UploadImageResponse
from pixcraft.services.image import guess_mime_type
from pixcraft.services.storage import sanitize_file_name

if TYPE_CHECKING:
    from pixcraft.services.repository import GenerationRepository
    from pixcraft.services.storage import StorageService

logger = setup_logging("upload")


class UploadService:
    """Decodes, validates and stores an uploaded original image.

    Metadata is written to Firestore on a best-effort basis: the upload is
    reported as successful once the bytes are in Cloud Storage.
    """

    def __init__(
        self,
        storage: "StorageService",
        repository: "GenerationRepository",
        max_upload_bytes: int = 10 * 1024 * 1024,
        originals_prefix: str = "originals",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.repository = repository
        self.max_upload_bytes = max_upload_bytes
        self.originals_prefix = originals_prefix
        self._clock = clock

    async def upload(self, request: UploadImageRequest, uid: str) -> UploadImageResponse:
        """Store the original photo and record its metadata.

        Raises:
            PermissionDenied: userId does not match the authenticated user.
            InvalidArgument: Payload is not base64 or exceeds the size limit.
        """
        if uid != request.user_id:
            raise PermissionDenied("User ID does not match authenticated user")

        try:
            image_bytes = base64.b64decode(request.image_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidArgument("imageBase64 is not valid base64") from exc
        if not image_bytes:
            raise InvalidArgument("imageBase64 is empty")
        if len(image_bytes) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise InvalidArgument(
                f"Image size exceeds {limit_mb}MB limit ({len(image_bytes)} bytes)"
            )

        file_name = sanitize_file_name(request.file_name)
        storage_path = f"{self.originals_prefix}/{uid}/{int(self._clock() * 1000)}_{file_name}"
        uploaded_at = datetime.now(timezone.utc).isoformat()
        image_url = await asyncio.to_thread(
            self.storage.upload,
            storage_path,
            image_bytes,
            guess_mime_type(image_bytes),
            {"userId": uid, "uploadedAt": uploaded_at},
        )

        try:
            self.repository.record_upload(
                {
                    "userId": uid,
                    "imageUrl": image_url,
                    "storagePath": storage_path,
                    "fileName": file_name,
                    "type": "original",
                    "createdAt": uploaded_at,
                }
            )
        except Exception as exc:
            logger.error(
                "Image uploaded but metadata save failed: %s",
                exc,
                extra={"user_id": uid, "error_type": type(exc).__name__},
            )

        logger.info("Upload completed: %s (%d bytes)", storage_path, len(image_bytes), extra={"user_id": uid})
        return UploadImageResponse(success=True, image_url=image_url, storage_path=storage_path)
