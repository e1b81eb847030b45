"""Unit tests for PromptComposer - instruction document and part ordering."""

import pytest

from fitboard.agents.prompt_composer import (
    DEFAULT_SCENE,
    GARMENTS_LABEL,
    HAIRSTYLE_LABEL,
    PERSON_LABEL,
    POSE_TEMPLATES,
    PromptComposer,
)


class TestCompose:
    """Tests for the instruction document."""

    @pytest.fixture
    def composer(self):
        return PromptComposer()

    def _compose(self, composer, **overrides):
        kwargs = dict(
            model_analysis="Oval face, brown eyes.",
            garment_analysis="Blue cotton shirt.",
            hairstyle_analysis="No hairstyle provided.",
            pose=POSE_TEMPLATES[0],
        )
        kwargs.update(overrides)
        return composer.compose(**kwargs)

    def test_contains_analyses_and_pose(self, composer):
        prompt = self._compose(composer)

        assert "# TASK: VIRTUAL TRY-ON" in prompt
        assert "Oval face, brown eyes." in prompt
        assert "Blue cotton shirt." in prompt
        assert POSE_TEMPLATES[0] in prompt

    def test_ends_with_image_only_directive(self, composer):
        assert self._compose(composer).strip().endswith("Generate ONLY the final image. No text.")

    @pytest.mark.parametrize("instructions", [None, "", "   "])
    def test_blank_direction_uses_default_scene(self, composer, instructions):
        prompt = self._compose(composer, instructions=instructions)

        assert f'"{DEFAULT_SCENE}"' in prompt

    def test_direction_replaces_scene(self, composer):
        prompt = self._compose(composer, instructions="Neon-lit Tokyo alley at night.")

        assert '"Neon-lit Tokyo alley at night."' in prompt
        assert DEFAULT_SCENE not in prompt

    def test_hair_step(self, composer):
        assert "Keep the original hair." in self._compose(composer)
        assert f"Replace the hair with the style from {HAIRSTYLE_LABEL}." in self._compose(
            composer, has_hairstyle=True
        )

    def test_face_lock(self, composer):
        locked = self._compose(composer)
        unlocked = self._compose(composer, lock_face=False)

        assert "Facial features MUST be a 100% match to the [PERSON IMAGE]." in locked
        assert "Preserve facial features with high fidelity." in unlocked
        assert "100% match" not in unlocked


class TestBuildParts:
    """Tests for the ordered request parts."""

    @pytest.fixture
    def composer(self):
        return PromptComposer()

    def test_order_with_hairstyle(self, composer, model_asset, garment, hairstyle):
        parts = composer.build_parts(model_asset, [garment.current], hairstyle.current, "PROMPT")

        assert [p.text if p.text else "<image>" for p in parts] == [
            PERSON_LABEL, "<image>",
            HAIRSTYLE_LABEL, "<image>",
            GARMENTS_LABEL, "<image>",
            "PROMPT",
        ]
        assert parts[1].data == model_asset.data

    def test_sections_omitted_when_empty(self, composer, model_asset):
        parts = composer.build_parts(model_asset, [], None, "PROMPT")

        assert [p.text for p in parts if p.text] == [PERSON_LABEL, "PROMPT"]


def test_five_pose_templates():
    assert len(POSE_TEMPLATES) == 5
    assert POSE_TEMPLATES[3] == "Walking towards the camera, candid street style shot."
