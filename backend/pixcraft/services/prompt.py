"""Scene prompt synthesizer.

Builds the positive prompt, negative prompt and request configuration for one
Imagen background-swap attempt. Everything here is pure: no I/O, no hidden
clock. The only inputs that vary the output are the explicit ``seed_material``
and, for ``build_request_config``, the supplied random generator.

Clause order inside both prompts is fixed, with identity locking first.
"""
import random
from typing import Optional, Union

from pixcraft.core.errors import InvalidDimensions
from pixcraft.models.generation import AspectRatio, ImageContext, Orientation, VariationRequest
from pixcraft.models.scene import SceneId
from pixcraft.services.scenes import get_scene

MAX_VARIATIONS = 4

# Calibrated width/height breakpoints. Tunable, do not re-derive.
PORTRAIT_MAX_RATIO = 0.95
LANDSCAPE_MIN_RATIO = 1.05
TALL_MAX_RATIO = 0.65
WIDE_MIN_RATIO = 1.6

GUIDANCE_RANGE = (4.5, 5.3)
GUIDANCE_BASE = 4.9
GUIDANCE_JITTER = 0.4

MASK_DILATION = 0.03

SEED_STRIDE = 1000
SEED_MODULUS = 2_147_483_646
STYLE_PRIME = 7

IDENTITY_CLAUSE = (
    "The output must show exactly the same person as the reference photo: identical "
    "face, facial features, identity, gender, age and skin tone, with the same "
    "hairstyle and clothing"
)

QUALITY_CLAUSE = "photorealistic, high quality, sharp focus"

POSE_VARIATIONS: tuple[str, ...] = (
    "standing relaxed with weight on one leg and hands resting naturally",
    "walking casually toward the camera mid-stride",
    "turned three-quarters to the side, glancing back over the shoulder",
    "leaning lightly against a nearby surface with arms loosely crossed",
    "seated comfortably with a natural, open posture",
    "standing with one hand in a pocket and a slight head tilt",
    "looking off into the distance with a candid, unposed stance",
)

STYLE_VARIATIONS: tuple[str, ...] = (
    "professional DSLR photograph, 85mm lens, shallow depth of field",
    "natural lifestyle photography, candid moment, soft background bokeh",
    "editorial magazine photograph, balanced composition, crisp detail",
    "cinematic photograph, subtle film grain, gentle color grading",
    "travel photography style, vibrant yet natural colors",
)

IDENTITY_NEGATIVE_TERMS: tuple[str, ...] = (
    "different person",
    "face swap",
    "changed facial features",
    "age change",
    "gender change",
    "skin tone change",
)

QUALITY_NEGATIVE_TERMS: tuple[str, ...] = (
    "blurry",
    "distorted",
    "deformed",
    "extra limbs",
    "extra fingers",
    "watermark",
    "text",
    "multiple faces",
    "low resolution",
)

BACKGROUND_NEGATIVE_TERMS: tuple[str, ...] = (
    "original background",
    "same backdrop as the source photo",
    "unchanged background",
)

POSE_NEGATIVE_TERMS: tuple[str, ...] = (
    "identical pose to the original photo",
    "copied original pose",
)

FRAMING_SUGGESTIONS: dict[AspectRatio, str] = {
    AspectRatio.tall: "tall vertical composition with full-body framing and headroom",
    AspectRatio.portrait: "vertical portrait composition with three-quarter body framing",
    AspectRatio.square: "centered square composition with waist-up framing",
    AspectRatio.landscape: "horizontal composition with the subject off-center and visible surroundings",
    AspectRatio.wide: "wide panoramic composition with the subject on a rule-of-thirds line",
}


def _check_variation_index(variation_index: int) -> None:
    if not 0 <= variation_index < MAX_VARIATIONS:
        raise ValueError(
            f"variation_index must be in [0, {MAX_VARIATIONS}), got {variation_index}"
        )


def pose_index(seed_material: int, variation_index: int) -> int:
    """Index into POSE_VARIATIONS for one attempt."""
    return (seed_material + variation_index) % len(POSE_VARIATIONS)


def style_index(seed_material: int, variation_index: int) -> int:
    """Index into STYLE_VARIATIONS, derived differently from pose_index."""
    return ((seed_material + variation_index) * STYLE_PRIME) % len(STYLE_VARIATIONS)


def build_positive_prompt(
    scene: Union[SceneId, str],
    variation_index: int,
    image_context: ImageContext,
    seed_material: int,
) -> str:
    """Build the positive instruction for one variation.

    Args:
        scene: Scene identifier.
        variation_index: Attempt index in [0, MAX_VARIATIONS).
        image_context: Geometry of the source photo.
        seed_material: Externally supplied integer (e.g. wall-clock millis)
            used to pick pose and style phrasing.

    Returns:
        Prompt string, clauses joined in priority order.

    Raises:
        UnknownScene: Scene is not configured.
        ValueError: variation_index out of range.
    """
    _check_variation_index(variation_index)
    definition = get_scene(scene)
    ctx = definition.context

    pose = POSE_VARIATIONS[pose_index(seed_material, variation_index)]
    style = STYLE_VARIATIONS[style_index(seed_material, variation_index)]

    clauses = [
        IDENTITY_CLAUSE,
        (
            f"Place this person in a {ctx.environment} setting with "
            f"{', '.join(ctx.background_elements)}, lit by {ctx.lighting}"
        ),
        f"Pose: {pose}, clearly different from the pose in the original photo",
        definition.base_prompt.strip(),
        f"Style: {style}",
        f"Framing: {image_context.framing}",
        QUALITY_CLAUSE,
    ]
    return ". ".join(clauses)


def build_negative_prompt(scene: Union[SceneId, str]) -> str:
    """Build the negative instruction for a scene.

    Raises:
        UnknownScene: Scene is not configured.
    """
    definition = get_scene(scene)
    terms = (
        IDENTITY_NEGATIVE_TERMS
        + QUALITY_NEGATIVE_TERMS
        + definition.negative_terms
        + BACKGROUND_NEGATIVE_TERMS
        + POSE_NEGATIVE_TERMS
    )
    return ", ".join(terms)


def classify_aspect_ratio(width: int, height: int) -> ImageContext:
    """Classify photo geometry into orientation and a supported aspect ratio.

    Raises:
        InvalidDimensions: width or height is not a positive integer.
    """
    if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
        raise InvalidDimensions(f"Invalid image dimensions: {width}x{height}")

    ratio = width / height
    if ratio < PORTRAIT_MAX_RATIO:
        orientation = Orientation.portrait
        aspect = AspectRatio.tall if ratio < TALL_MAX_RATIO else AspectRatio.portrait
    elif ratio > LANDSCAPE_MIN_RATIO:
        orientation = Orientation.landscape
        aspect = AspectRatio.wide if ratio > WIDE_MIN_RATIO else AspectRatio.landscape
    else:
        orientation = Orientation.square
        aspect = AspectRatio.square

    return ImageContext(
        width=width,
        height=height,
        orientation=orientation,
        aspect_ratio=aspect,
        framing=FRAMING_SUGGESTIONS[aspect],
    )


def build_request_config(
    scene: Union[SceneId, str],
    variation_index: int,
    image_context: ImageContext,
    seed_material: int,
    rng: Optional[random.Random] = None,
) -> VariationRequest:
    """Assemble the full VariationRequest for one attempt.

    Seeds for different indices of the same request never collide: each index
    owns a SEED_STRIDE-wide slot and the jitter stays inside it.
    """
    rng = rng or random.Random()
    definition = get_scene(scene)

    jitter = rng.randrange(SEED_STRIDE)
    seed = (seed_material % SEED_MODULUS + variation_index * SEED_STRIDE + jitter) % SEED_MODULUS + 1

    low, high = GUIDANCE_RANGE
    guidance = GUIDANCE_BASE + rng.uniform(-GUIDANCE_JITTER, GUIDANCE_JITTER)
    guidance = round(min(high, max(low, guidance)), 2)

    return VariationRequest(
        scene=definition.id,
        variation_index=variation_index,
        positive_prompt=build_positive_prompt(definition.id, variation_index, image_context, seed_material),
        negative_prompt=build_negative_prompt(definition.id),
        seed=seed,
        guidance_strength=guidance,
        aspect_ratio=image_context.aspect_ratio,
    )
