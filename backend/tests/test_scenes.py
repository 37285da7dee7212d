"""Tests for the scene tables and lookup."""
import pytest
from pydantic import ValidationError

from pixcraft.core.errors import SceneConfigurationError, UnknownScene
from pixcraft.models.scene import Scene, SceneId
from pixcraft.services import scenes
from pixcraft.services.scenes import get_scene, list_scenes, validate_scene_tables


class TestGetScene:
    def test_returns_scene_for_enum(self) -> None:
        scene = get_scene(SceneId.beach)
        assert isinstance(scene, Scene)
        assert scene.id == SceneId.beach
        assert scene.context.environment == "tropical beach"

    def test_returns_scene_for_string(self) -> None:
        assert get_scene("office").id == SceneId.office

    def test_every_scene_resolves(self) -> None:
        for scene_id in SceneId:
            scene = get_scene(scene_id)
            assert scene.base_prompt
            assert scene.negative_terms
            assert scene.context.background_elements

    def test_unknown_string_raises(self) -> None:
        with pytest.raises(UnknownScene) as exc_info:
            get_scene("volcano")
        assert exc_info.value.scene_id == "volcano"
        assert exc_info.value.status_code == 400

    def test_missing_table_entry_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        trimmed = {k: v for k, v in scenes.SCENE_CONTEXTS.items() if k != SceneId.cafe}
        monkeypatch.setattr(scenes, "SCENE_CONTEXTS", trimmed)
        with pytest.raises(UnknownScene):
            get_scene(SceneId.cafe)

    def test_scene_is_immutable(self) -> None:
        scene = get_scene(SceneId.city)
        with pytest.raises(ValidationError):
            scene.base_prompt = "changed"  # type: ignore[misc]


class TestValidateSceneTables:
    def test_shipped_tables_are_consistent(self) -> None:
        validate_scene_tables()

    def test_reports_missing_entries(self, monkeypatch: pytest.MonkeyPatch) -> None:
        trimmed = {k: v for k, v in scenes.SCENE_NEGATIVE_PROMPTS.items() if k != SceneId.garden}
        monkeypatch.setattr(scenes, "SCENE_NEGATIVE_PROMPTS", trimmed)
        with pytest.raises(SceneConfigurationError) as exc_info:
            validate_scene_tables()
        assert "SCENE_NEGATIVE_PROMPTS missing garden" in str(exc_info.value)


class TestListScenes:
    def test_lists_every_scene_once(self) -> None:
        summaries = list_scenes()
        assert [s.id for s in summaries] == list(SceneId)

    def test_summary_serializes_camel_case(self) -> None:
        data = list_scenes()[0].model_dump(by_alias=True, mode="json")
        assert set(data) == {"id", "displayName", "icon", "description"}
        assert data["id"] == "beach"
