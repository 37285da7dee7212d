"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pixcraft.core.config import get_settings
from pixcraft.core.logging import setup_logging

# Setup logging
logger = setup_logging("main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build every collaborator once at startup and share them via app.state."""
    settings = get_settings()
    try:
        from pixcraft.services.auth import FirebaseTokenVerifier
        from pixcraft.services.generation import GenerationService
        from pixcraft.services.image import ImagenClient
        from pixcraft.services.repository import GenerationRepository
        from pixcraft.services.scenes import validate_scene_tables
        from pixcraft.services.storage import ImageDownloader, StorageService
        from pixcraft.services.upload import UploadService

        validate_scene_tables()

        storage = StorageService(
            bucket_name=settings.storage_bucket,
            project_id=settings.gcp_project_id,
        )
        repository = GenerationRepository(
            project_id=settings.gcp_project_id,
            database=settings.firestore_database,
            generations_collection=settings.generations_collection,
            images_collection=settings.images_collection,
        )

        app.state.token_verifier = FirebaseTokenVerifier(project_id=settings.gcp_project_id)
        app.state.generation_service = GenerationService(
            imagen=ImagenClient(
                project_id=settings.gcp_project_id,
                location=settings.vertex_ai_location,
                model=settings.imagen_model,
            ),
            storage=storage,
            downloader=ImageDownloader(timeout=settings.download_timeout_seconds),
            repository=repository,
            max_variations=settings.max_variations,
            inter_call_delay=(settings.inter_call_delay_min, settings.inter_call_delay_max),
            rate_limit_backoff=settings.rate_limit_backoff_seconds,
            generated_prefix=settings.generated_prefix,
        )
        app.state.upload_service = UploadService(
            storage=storage,
            repository=repository,
            max_upload_bytes=settings.max_upload_bytes,
            originals_prefix=settings.originals_prefix,
        )
        logger.info("Services initialized successfully")
    except Exception as exc:
        logger.error(
            "Service initialization failed, running in degraded mode",
            exc_info=True,
            extra={"service": "main", "error_type": type(exc).__name__},
        )
        # Continue without services; endpoints return 503 until fixed

    yield


# Create FastAPI app
app = FastAPI(
    title="PixCraft Backend",
    description="AI photo scene variations powered by Imagen on Vertex AI",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[f"http://localhost:{settings.frontend_port}"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def invalid_argument_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed or missing request fields as invalid-argument (400)."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Missing or invalid request fields", "errors": jsonable_encoder(exc.errors())},
    )


# Register routers
from pixcraft.api.generation import router as generation_router  # noqa: E402

app.include_router(generation_router)


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint.

    Always returns HTTP 200; check `services` for actual status.
    """
    state = request.app.state
    services = {
        name: "ok" if getattr(state, attr, None) is not None else "unavailable"
        for name, attr in (
            ("generation", "generation_service"),
            ("upload", "upload_service"),
            ("auth", "token_verifier"),
        )
    }

    logger.info("Health check requested")
    return {
        "status": "ok",
        "version": app.version,
        "services": services,
    }
