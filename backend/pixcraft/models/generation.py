"""Generation, upload and image-context data models."""
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field

from pixcraft.models.base import CamelModel
from pixcraft.models.scene import SceneId


class Orientation(str, Enum):
    """Source photo orientation."""

    portrait = "portrait"
    landscape = "landscape"
    square = "square"


class AspectRatio(str, Enum):
    """Output aspect ratios supported by Imagen."""

    tall = "9:16"
    portrait = "3:4"
    square = "1:1"
    landscape = "4:3"
    wide = "16:9"


class GenerationStatus(str, Enum):
    """Lifecycle of a generation record."""

    processing = "processing"
    completed = "completed"
    failed = "failed"


class ImageContext(CamelModel):
    """Geometry of the source photo, derived once per generation request."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    orientation: Orientation
    aspect_ratio: AspectRatio
    framing: str


class VariationRequest(CamelModel):
    """Everything needed for one Imagen call."""

    model_config = ConfigDict(frozen=True)

    scene: SceneId
    variation_index: int = Field(..., ge=0)
    positive_prompt: str = Field(..., min_length=1)
    negative_prompt: str = Field(..., min_length=1)
    seed: int = Field(..., ge=1)
    guidance_strength: float
    aspect_ratio: AspectRatio


class GeneratedVariation(CamelModel):
    """One successfully generated and stored variation."""

    model_config = ConfigDict(frozen=True)

    scene: SceneId
    variation_index: int
    prompt: str
    image_url: str
    storage_path: str


class GeneratePhotoRequest(CamelModel):
    """Request body for POST /api/generations."""

    image_url: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    selected_scene: str = Field(..., min_length=1)


class GeneratePhotoResponse(CamelModel):
    """Response body for POST /api/generations."""

    success: bool
    generation_id: str
    message: str
    variations: list[GeneratedVariation] = Field(default_factory=list)
    image_context: Optional[ImageContext] = None
    failed_count: int = 0
    processing_time_ms: int = 0


class UploadImageRequest(CamelModel):
    """Request body for POST /api/uploads."""

    image_base64: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    file_name: str = Field(..., min_length=1)


class UploadImageResponse(CamelModel):
    """Response body for POST /api/uploads."""

    success: bool
    image_url: str
    storage_path: str
