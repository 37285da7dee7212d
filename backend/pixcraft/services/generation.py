"""GenerationService: orchestrates one photo-variation request."""
import asyncio
import random
import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from pixcraft.core.errors import (
    DownstreamError,
    DownstreamRateLimited,
    GenerationFailed,
    PermissionDenied,
)
from pixcraft.core.logging import setup_logging
from pixcraft.models.generation import (
    GeneratedVariation,
    GeneratePhotoRequest,
    GeneratePhotoResponse,
    GenerationStatus,
    ImageContext,
)
from pixcraft.models.scene import Scene
from pixcraft.services.image import OUTPUT_MIME_TYPE, read_image_dimensions
from pixcraft.services.prompt import MAX_VARIATIONS, build_request_config, classify_aspect_ratio
from pixcraft.services.scenes import get_scene

if TYPE_CHECKING:
    from pixcraft.services.image import ImagenClient
    from pixcraft.services.repository import GenerationRepository
    from pixcraft.services.storage import ImageDownloader, StorageService

logger = setup_logging("generation")


class GenerationService:
    """Orchestrates a single generation request.

    Responsibilities:
    1. Check the caller owns the request and the scene exists
    2. Download the source photo and classify its geometry
    3. Find or create the Firestore generation record
    4. Generate variations one at a time, pacing calls to Imagen
    5. Upload each result to Cloud Storage
    6. Write final status and return partial results

    A failed attempt never aborts its siblings. The request only fails as a
    whole when every attempt failed.
    """

    def __init__(
        self,
        imagen: "ImagenClient",
        storage: "StorageService",
        downloader: "ImageDownloader",
        repository: "GenerationRepository",
        max_variations: int = MAX_VARIATIONS,
        inter_call_delay: tuple[float, float] = (2.0, 4.0),
        rate_limit_backoff: float = 15.0,
        generated_prefix: str = "generated",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.imagen = imagen
        self.storage = storage
        self.downloader = downloader
        self.repository = repository
        self.max_variations = max(1, min(max_variations, MAX_VARIATIONS))
        self.inter_call_delay = inter_call_delay
        self.rate_limit_backoff = rate_limit_backoff
        self.generated_prefix = generated_prefix
        self._sleep = sleep
        self._clock = clock
        self._rng = rng or random.Random()

    async def generate(self, request: GeneratePhotoRequest, uid: str) -> GeneratePhotoResponse:
        """Generate scene variations for one uploaded photo.

        Args:
            request: imageUrl, userId and selectedScene from the caller.
            uid: Authenticated user id.

        Returns:
            GeneratePhotoResponse listing the variations that succeeded.

        Raises:
            PermissionDenied: userId does not match the authenticated user.
            UnknownScene: selectedScene is not configured.
            InvalidDimensions: Source photo is unreadable.
            GenerationFailed: Every variation attempt failed.
        """
        started = self._clock()

        # --- 1. Validate ---
        if uid != request.user_id:
            logger.error("User ID mismatch", extra={"user_id": uid})
            raise PermissionDenied("User ID does not match authenticated user")
        scene = get_scene(request.selected_scene)

        # --- 2. Source photo ---
        source_bytes = await asyncio.to_thread(self.downloader.download, request.image_url)
        width, height = read_image_dimensions(source_bytes)
        image_context = classify_aspect_ratio(width, height)
        logger.info(
            "Source image %dx%d classified as %s %s",
            width,
            height,
            image_context.orientation.value,
            image_context.aspect_ratio.value,
            extra={"user_id": uid, "scene": scene.id.value},
        )

        # --- 3. Generation record ---
        generation_id, persisted = self._open_record(request, scene, image_context)

        # --- 4/5. Variations ---
        variations, failed_count = await self._generate_variations(
            scene, image_context, source_bytes, uid, generation_id
        )
        processing_time_ms = int((self._clock() - started) * 1000)

        # --- 6. Final status ---
        status = GenerationStatus.completed if variations else GenerationStatus.failed
        if persisted:
            self._close_record(generation_id, variations, status, failed_count, processing_time_ms)

        logger.info(
            "Generated %d/%d variations in %d ms",
            len(variations),
            self.max_variations,
            processing_time_ms,
            extra={"generation_id": generation_id, "scene": scene.id.value},
        )

        if not variations:
            raise GenerationFailed(
                f"All {self.max_variations} variations failed for generation {generation_id}"
            )

        return GeneratePhotoResponse(
            success=True,
            generation_id=generation_id,
            message=f"Successfully generated {len(variations)} variations",
            variations=variations,
            image_context=image_context,
            failed_count=failed_count,
            processing_time_ms=processing_time_ms,
        )

    async def _generate_variations(
        self,
        scene: Scene,
        image_context: ImageContext,
        source_bytes: bytes,
        uid: str,
        generation_id: str,
    ) -> tuple[list[GeneratedVariation], int]:
        seed_material = int(self._clock() * 1000)
        variations: list[GeneratedVariation] = []
        failed_count = 0
        rate_limited = False

        for index in range(self.max_variations):
            if index > 0:
                if rate_limited:
                    delay = self.rate_limit_backoff
                else:
                    delay = self._rng.uniform(*self.inter_call_delay)
                await self._sleep(delay)
            rate_limited = False

            context = {"generation_id": generation_id, "scene": scene.id.value, "variation_index": index}
            variation = build_request_config(scene.id, index, image_context, seed_material, rng=self._rng)
            try:
                image_bytes = await asyncio.to_thread(self.imagen.generate, variation, source_bytes)
                path = (
                    f"{self.generated_prefix}/{uid}/{generation_id}/"
                    f"{scene.id.value}_{index}_{int(self._clock() * 1000)}.jpg"
                )
                url = await asyncio.to_thread(
                    self.storage.upload,
                    path,
                    image_bytes,
                    OUTPUT_MIME_TYPE,
                    {
                        "userId": uid,
                        "generationId": generation_id,
                        "variationType": scene.id.value,
                        "variationIndex": str(index),
                        "seed": str(variation.seed),
                        "prompt": variation.positive_prompt,
                    },
                )
            except DownstreamRateLimited as exc:
                failed_count += 1
                rate_limited = True
                logger.warning(
                    "Variation %d rate limited, backing off %.0fs: %s",
                    index,
                    self.rate_limit_backoff,
                    exc,
                    extra={**context, "error_type": type(exc).__name__},
                )
                continue
            except DownstreamError as exc:
                failed_count += 1
                logger.error(
                    "Variation %d failed: %s: %s",
                    index,
                    type(exc).__name__,
                    exc,
                    extra={**context, "error_type": type(exc).__name__},
                )
                continue
            except Exception as exc:
                failed_count += 1
                logger.error(
                    "Variation %d failed unexpectedly: %s: %s",
                    index,
                    type(exc).__name__,
                    exc,
                    exc_info=True,
                    extra={**context, "error_type": type(exc).__name__},
                )
                continue

            variations.append(
                GeneratedVariation(
                    scene=scene.id,
                    variation_index=index,
                    prompt=variation.positive_prompt,
                    image_url=url,
                    storage_path=path,
                )
            )
            logger.info("Variation %d stored at %s", index, path, extra=context)

        return variations, failed_count

    def _open_record(
        self,
        request: GeneratePhotoRequest,
        scene: Scene,
        image_context: ImageContext,
    ) -> tuple[str, bool]:
        """Find or create the generation record.

        Returns:
            (generation_id, persisted). When Firestore is unavailable a
            temporary id is returned and persisted is False.
        """
        fields = {
            "status": GenerationStatus.processing.value,
            "selectedScene": scene.id.value,
            "variationTypes": [scene.id.value] * self.max_variations,
            "imageContext": image_context.model_dump(by_alias=True, mode="json"),
        }
        try:
            existing = self.repository.find_generation(request.user_id, request.image_url)
            if existing is not None:
                self.repository.update_generation(existing, fields)
                logger.info("Reusing generation document %s", existing, extra={"generation_id": existing})
                return existing, True
            generation_id = self.repository.create_generation(
                {
                    "userId": request.user_id,
                    "originalImage": {
                        "url": request.image_url,
                        "storagePath": "",
                        "fileName": "uploaded_image.jpg",
                    },
                    "generatedImages": [],
                    **fields,
                }
            )
            return generation_id, True
        except Exception as exc:
            generation_id = f"gen_{int(self._clock() * 1000)}"
            logger.error(
                "Firestore unavailable, continuing with temporary id %s: %s",
                generation_id,
                exc,
                extra={"generation_id": generation_id, "error_type": type(exc).__name__},
            )
            return generation_id, False

    def _close_record(
        self,
        generation_id: str,
        variations: list[GeneratedVariation],
        status: GenerationStatus,
        failed_count: int,
        processing_time_ms: int,
    ) -> None:
        try:
            self.repository.complete_generation(
                generation_id,
                {
                    "generatedImages": [v.model_dump(by_alias=True, mode="json") for v in variations],
                    "status": status.value,
                    "failedCount": failed_count,
                    "processingTimeMs": processing_time_ms,
                },
            )
        except Exception as exc:
            logger.error(
                "Failed to update generation %s: %s",
                generation_id,
                exc,
                extra={"generation_id": generation_id, "error_type": type(exc).__name__},
            )
