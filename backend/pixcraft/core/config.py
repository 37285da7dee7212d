"""Configuration management using pydantic-settings."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GCP settings (required)
    gcp_project_id: str
    storage_bucket: str

    # Vertex AI / Imagen
    vertex_ai_location: str = "us-central1"
    imagen_model: str = "imagen-3.0-capability-001"
    max_variations: int = 4

    # Firestore
    firestore_database: str = "pixcraft"
    users_collection: str = "users"
    generations_collection: str = "user_generations"
    images_collection: str = "images"

    # Cloud Storage prefixes
    originals_prefix: str = "originals"
    generated_prefix: str = "generated"

    # Pacing between Imagen calls (seconds)
    inter_call_delay_min: float = 2.0
    inter_call_delay_max: float = 4.0
    rate_limit_backoff_seconds: float = 15.0

    # Source image handling
    download_timeout_seconds: float = 30.0
    max_upload_bytes: int = 10 * 1024 * 1024

    # Application settings
    app_name: str = "pixcraft-backend"

    # Server settings
    backend_host: str = "localhost"
    backend_port: int = 8000
    frontend_port: int = 3000


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
