"""Imagen background-swap client and image metadata helpers."""
import io
import logging
from typing import Any, Optional

import httpx
from PIL import Image, UnidentifiedImageError

from pixcraft.core.errors import (
    DownstreamEmptyResult,
    DownstreamRateLimited,
    DownstreamUnavailable,
    InvalidDimensions,
)
from pixcraft.models.generation import VariationRequest
from pixcraft.services.prompt import MASK_DILATION

logger = logging.getLogger(__name__)

OUTPUT_MIME_TYPE = "image/jpeg"


def read_image_dimensions(image_bytes: bytes) -> tuple[int, int]:
    """Return (width, height) of an encoded image.

    Raises:
        InvalidDimensions: The bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidDimensions(f"Unreadable source image: {exc}") from exc
    return width, height


def guess_mime_type(image_bytes: bytes) -> str:
    """Best-effort MIME type of an encoded image, defaulting to JPEG."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return Image.MIME.get(img.format or "", OUTPUT_MIME_TYPE)
    except (UnidentifiedImageError, OSError):
        return OUTPUT_MIME_TYPE


class ImagenClient:
    """Calls Imagen on Vertex AI to swap the background behind the subject."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        model: str = "imagen-3.0-capability-001",
        client: Any = None,
    ) -> None:
        self.project_id = project_id
        self.location = location
        self.model = model
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            from google import genai  # type: ignore[import-untyped]

            self._client = genai.Client(
                vertexai=True,
                project=self.project_id,
                location=self.location,
            )
        return self._client

    def generate(self, variation: VariationRequest, reference_image_bytes: bytes) -> bytes:
        """Generate one scene variation from the reference photo.

        Args:
            variation: Prompts and sampling parameters for this attempt.
            reference_image_bytes: Encoded source photo.

        Returns:
            Encoded JPEG bytes of the generated image.

        Raises:
            DownstreamRateLimited: Imagen answered HTTP 429.
            DownstreamUnavailable: Any other API or transport failure.
            DownstreamEmptyResult: No image came back (e.g. safety filtered).
        """
        from google.genai import errors  # type: ignore[import-untyped]

        try:
            response = self._call_image_api(variation, reference_image_bytes)
        except errors.APIError as exc:
            if exc.code == 429:
                raise DownstreamRateLimited(f"Imagen rate limited: {exc.message}") from exc
            raise DownstreamUnavailable(f"Imagen error {exc.code}: {exc.message}") from exc
        except (httpx.TransportError, ConnectionError, TimeoutError) as exc:
            raise DownstreamUnavailable(f"Imagen unreachable: {exc}") from exc

        generated = getattr(response, "generated_images", None) or []
        for item in generated:
            image = getattr(item, "image", None)
            if image is not None and image.image_bytes:
                return bytes(image.image_bytes)
            reason = getattr(item, "rai_filtered_reason", None)
            if reason:
                logger.warning(
                    "Imagen filtered variation %d: %s",
                    variation.variation_index,
                    reason,
                    extra={"scene": variation.scene.value, "variation_index": variation.variation_index},
                )

        raise DownstreamEmptyResult(
            f"No image returned for {variation.scene.value} variation {variation.variation_index}"
        )

    def _call_image_api(self, variation: VariationRequest, reference_image_bytes: bytes) -> Any:
        """Issue the edit_image request and return the raw SDK response."""
        from google.genai import types  # type: ignore[import-untyped]

        raw_reference = types.RawReferenceImage(
            reference_id=0,
            reference_image=types.Image(
                image_bytes=reference_image_bytes,
                mime_type=guess_mime_type(reference_image_bytes),
            ),
        )
        # Mask everything except the subject so only the background is replaced.
        mask_reference = types.MaskReferenceImage(
            reference_id=1,
            reference_image=None,
            config=types.MaskReferenceConfig(
                mask_mode="MASK_MODE_BACKGROUND",
                mask_dilation=MASK_DILATION,
            ),
        )

        logger.debug(
            "Calling %s for %s variation %d (seed=%d, guidance=%.2f, aspect=%s)",
            self.model,
            variation.scene.value,
            variation.variation_index,
            variation.seed,
            variation.guidance_strength,
            variation.aspect_ratio.value,
        )
        return self.client.models.edit_image(
            model=self.model,
            prompt=variation.positive_prompt,
            reference_images=[raw_reference, mask_reference],
            config=types.EditImageConfig(
                edit_mode="EDIT_MODE_BGSWAP",
                negative_prompt=variation.negative_prompt,
                number_of_images=1,
                seed=variation.seed,
                guidance_scale=variation.guidance_strength,
                aspect_ratio=variation.aspect_ratio.value,
                safety_filter_level="BLOCK_MEDIUM_AND_ABOVE",
                person_generation="ALLOW_ADULT",
                output_mime_type=OUTPUT_MIME_TYPE,
                include_rai_reason=True,
            ),
        )
