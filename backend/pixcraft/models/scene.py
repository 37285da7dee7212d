"""Scene reference data models."""
from enum import Enum

from pydantic import ConfigDict, Field

from pixcraft.models.base import CamelModel


class SceneId(str, Enum):
    """Background scene presets offered to the user."""

    beach = "beach"
    city = "city"
    mountain = "mountain"
    cafe = "cafe"
    office = "office"
    garden = "garden"
    studio = "studio"


class SceneContext(CamelModel):
    """Ambient context interpolated into the scene clause of a prompt."""

    model_config = ConfigDict(frozen=True)

    lighting: str
    mood: str
    color_palette: str
    environment: str
    background_elements: tuple[str, ...] = Field(..., min_length=1)


class Scene(CamelModel):
    """Full scene definition assembled from the scene tables."""

    model_config = ConfigDict(frozen=True)

    id: SceneId
    display_name: str
    icon: str
    description: str
    base_prompt: str
    negative_terms: tuple[str, ...]
    context: SceneContext


class SceneSummary(CamelModel):
    """Public catalog entry returned by GET /api/scenes."""

    id: SceneId
    display_name: str
    icon: str
    description: str
