"""Generation, upload and scene catalog API router."""
import logging
from typing import Any, Awaitable

from fastapi import APIRouter, Depends, HTTPException, Request

from pixcraft.core.errors import PixcraftError
from pixcraft.models.generation import (
    GeneratePhotoRequest,
    GeneratePhotoResponse,
    UploadImageRequest,
    UploadImageResponse,
)
from pixcraft.models.scene import SceneSummary
from pixcraft.services.auth import FirebaseTokenVerifier, bearer_token
from pixcraft.services.generation import GenerationService
from pixcraft.services.scenes import list_scenes
from pixcraft.services.upload import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


def _from_state(request: Request, name: str) -> Any:
    """Retrieve a service built at startup, or answer 503 if it is missing."""
    svc = getattr(request.app.state, name, None)
    if svc is None:
        raise HTTPException(
            status_code=503,
            detail="Backend services unavailable. Service not initialized.",
        )
    return svc


def get_generation_service(request: Request) -> GenerationService:
    """FastAPI dependency: GenerationService from app.state."""
    return _from_state(request, "generation_service")


def get_upload_service(request: Request) -> UploadService:
    """FastAPI dependency: UploadService from app.state."""
    return _from_state(request, "upload_service")


def get_current_uid(request: Request) -> str:
    """FastAPI dependency: uid of the caller's Firebase ID token.

    Raises:
        HTTPException 401: Missing or invalid bearer token.
    """
    verifier: FirebaseTokenVerifier = _from_state(request, "token_verifier")
    try:
        return verifier.verify(bearer_token(request))
    except PixcraftError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


async def _run(operation: str, call: Awaitable[Any]) -> Any:
    """Await a service call and translate application errors to HTTP errors."""
    try:
        return await call
    except PixcraftError as exc:
        logger.error(
            "%s failed: %s",
            operation,
            exc.message,
            exc_info=exc.status_code >= 500,
            extra={"service": "GenerationRouter", "error_type": type(exc).__name__},
        )
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except Exception as exc:
        logger.error(
            "%s failed",
            operation,
            exc_info=True,
            extra={"service": "GenerationRouter", "error_type": type(exc).__name__},
        )
        raise HTTPException(
            status_code=500,
            detail="Failed to generate photo variations" if operation == "generate" else "Failed to upload image",
        ) from exc


@router.post("/generations", response_model=GeneratePhotoResponse)
async def generate_photo_variations(
    body: GeneratePhotoRequest,
    uid: str = Depends(get_current_uid),
    service: GenerationService = Depends(get_generation_service),
) -> GeneratePhotoResponse:
    """Generate scene variations of an uploaded photo.

    Raises:
        HTTPException 401: Not authenticated.
        HTTPException 400: Missing fields or unknown scene.
        HTTPException 403: userId does not match the authenticated user.
        HTTPException 500: Every variation failed or the source image is unreachable.
    """
    return await _run("generate", service.generate(body, uid))


@router.post("/uploads", response_model=UploadImageResponse)
async def upload_image(
    body: UploadImageRequest,
    uid: str = Depends(get_current_uid),
    service: UploadService = Depends(get_upload_service),
) -> UploadImageResponse:
    """Upload an original photo (base64) to Cloud Storage."""
    return await _run("upload", service.upload(body, uid))


@router.get("/scenes", response_model=list[SceneSummary])
async def get_scenes() -> list[SceneSummary]:
    """List the scene presets the app can request."""
    return list_scenes()
