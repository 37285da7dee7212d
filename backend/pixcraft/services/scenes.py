"""Scene reference tables and the checked scene lookup."""
from typing import Union

from pixcraft.core.errors import SceneConfigurationError, UnknownScene
from pixcraft.models.scene import Scene, SceneContext, SceneId, SceneSummary

SCENE_PROMPTS: dict[SceneId, str] = {
    SceneId.beach: (
        "stunning tropical beach background with crystal clear turquoise ocean water, "
        "white sandy shore, tall swaying palm trees, bright sunny sky with few clouds, "
        "paradise island atmosphere"
    ),
    SceneId.city: (
        "modern urban cityscape background with towering glass skyscrapers, busy street "
        "scene, contemporary architecture, evening golden hour lighting, metropolitan "
        "atmosphere"
    ),
    SceneId.mountain: (
        "majestic mountain landscape background with snow-capped peaks, dramatic alpine "
        "scenery, green valley below, clear blue sky, breathtaking vista"
    ),
    SceneId.cafe: (
        "cozy modern cafe interior background with warm ambient lighting, wooden "
        "furniture, potted plants, large windows, aesthetic minimalist decor, inviting "
        "atmosphere"
    ),
    SceneId.office: (
        "bright contemporary office background with glass meeting rooms, clean desks, "
        "ergonomic chairs, indoor plants, floor-to-ceiling windows, professional "
        "corporate atmosphere"
    ),
    SceneId.garden: (
        "lush botanical garden background with blooming flower beds, manicured hedges, "
        "stone pathway, dappled sunlight through leafy trees, peaceful spring atmosphere"
    ),
    SceneId.studio: (
        "professional photo studio background with seamless neutral backdrop, softbox "
        "lighting setup, clean minimal set, editorial portrait atmosphere"
    ),
}

SCENE_NEGATIVE_PROMPTS: dict[SceneId, tuple[str, ...]] = {
    SceneId.beach: ("snow", "winter clothing", "city buildings", "indoor furniture", "dark stormy sky"),
    SceneId.city: ("beach sand", "ocean waves", "forest", "empty countryside", "farm animals"),
    SceneId.mountain: ("beach", "palm trees", "city skyscrapers", "indoor room", "traffic"),
    SceneId.cafe: ("outdoor landscape", "beach", "snow", "empty room", "harsh fluorescent light"),
    SceneId.office: ("bedroom", "beach", "messy clutter", "party decorations", "outdoor wilderness"),
    SceneId.garden: ("dead plants", "concrete parking lot", "snowstorm", "indoor office", "traffic"),
    SceneId.studio: ("cluttered background", "outdoor scenery", "busy street", "furniture", "colored gels"),
}

SCENE_CONTEXTS: dict[SceneId, SceneContext] = {
    SceneId.beach: SceneContext(
        lighting="bright natural midday sunlight",
        mood="relaxed vacation",
        color_palette="turquoise, white sand, vivid green",
        environment="tropical beach",
        background_elements=("turquoise ocean", "white sand", "palm trees", "blue sky"),
    ),
    SceneId.city: SceneContext(
        lighting="warm golden hour light with city reflections",
        mood="energetic metropolitan",
        color_palette="steel blue, amber, glass reflections",
        environment="modern city street",
        background_elements=("glass skyscrapers", "busy street", "contemporary architecture"),
    ),
    SceneId.mountain: SceneContext(
        lighting="crisp clear daylight",
        mood="adventurous and serene",
        color_palette="alpine white, deep green, sky blue",
        environment="alpine mountain viewpoint",
        background_elements=("snow-capped peaks", "green valley", "clear blue sky"),
    ),
    SceneId.cafe: SceneContext(
        lighting="soft warm ambient indoor light",
        mood="cozy and inviting",
        color_palette="warm wood, cream, plant green",
        environment="cozy cafe interior",
        background_elements=("wooden furniture", "potted plants", "large windows"),
    ),
    SceneId.office: SceneContext(
        lighting="even bright daylight from large windows",
        mood="confident and professional",
        color_palette="white, light grey, muted blue",
        environment="modern office",
        background_elements=("glass meeting rooms", "clean desks", "indoor plants"),
    ),
    SceneId.garden: SceneContext(
        lighting="dappled soft sunlight through leaves",
        mood="calm and fresh",
        color_palette="leaf green, blossom pink, warm stone",
        environment="botanical garden",
        background_elements=("blooming flower beds", "manicured hedges", "stone pathway"),
    ),
    SceneId.studio: SceneContext(
        lighting="controlled softbox key light with gentle fill",
        mood="polished editorial",
        color_palette="neutral grey, soft white",
        environment="professional photo studio",
        background_elements=("seamless neutral backdrop", "softbox lights"),
    ),
}

# display name, icon, description
SCENE_CATALOG: dict[SceneId, tuple[str, str, str]] = {
    SceneId.beach: ("Tropical Beach", "🏖️", "Sunny paradise shoreline with palm trees"),
    SceneId.city: ("City Lights", "🏙️", "Modern skyline at golden hour"),
    SceneId.mountain: ("Mountain Peak", "🏔️", "Snow-capped alpine vista"),
    SceneId.cafe: ("Cozy Cafe", "☕", "Warm cafe interior with plants and wood"),
    SceneId.office: ("Modern Office", "💼", "Bright professional workspace"),
    SceneId.garden: ("Botanical Garden", "🌷", "Blooming flowers and soft sunlight"),
    SceneId.studio: ("Photo Studio", "📸", "Clean editorial studio backdrop"),
}


def _as_scene_id(scene: Union[SceneId, str]) -> SceneId:
    if isinstance(scene, SceneId):
        return scene
    try:
        return SceneId(scene)
    except ValueError:
        raise UnknownScene(str(scene)) from None


def get_scene(scene: Union[SceneId, str]) -> Scene:
    """Look up a scene in every table.

    Args:
        scene: Scene identifier, as enum member or raw string.

    Returns:
        The assembled Scene.

    Raises:
        UnknownScene: When the identifier is missing from any table.
    """
    scene_id = _as_scene_id(scene)
    try:
        display_name, icon, description = SCENE_CATALOG[scene_id]
        return Scene(
            id=scene_id,
            display_name=display_name,
            icon=icon,
            description=description,
            base_prompt=SCENE_PROMPTS[scene_id],
            negative_terms=SCENE_NEGATIVE_PROMPTS[scene_id],
            context=SCENE_CONTEXTS[scene_id],
        )
    except KeyError:
        raise UnknownScene(scene_id.value) from None


def list_scenes() -> list[SceneSummary]:
    """Return the public scene catalog in enum order."""
    return [
        SceneSummary(id=scene_id, display_name=name, icon=icon, description=description)
        for scene_id, (name, icon, description) in SCENE_CATALOG.items()
    ]


def validate_scene_tables() -> None:
    """Check that every SceneId is present in all scene tables.

    Raises:
        SceneConfigurationError: Listing the ids missing from each table.
    """
    tables = {
        "SCENE_PROMPTS": SCENE_PROMPTS,
        "SCENE_NEGATIVE_PROMPTS": SCENE_NEGATIVE_PROMPTS,
        "SCENE_CONTEXTS": SCENE_CONTEXTS,
        "SCENE_CATALOG": SCENE_CATALOG,
    }
    problems = []
    for name, table in tables.items():
        missing = [scene_id.value for scene_id in SceneId if scene_id not in table]
        if missing:
            problems.append(f"{name} missing {', '.join(missing)}")
    if problems:
        raise SceneConfigurationError("; ".join(problems))
