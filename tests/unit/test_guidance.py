"""Tests for the two public entry points of the guidance engine."""

import re

from hazardguide.core.reference import DEFAULT_REFERENCE
from hazardguide.core.types import GuidanceStep, StructureType
from hazardguide.pipeline.catalog import build_catalog
from hazardguide.pipeline.guidance import generate_guidance, generate_step_images

DATA_URL = re.compile(r"^data:image/svg\+xml;base64,")


# ---------------------------------------------------------------------------
# generate_guidance
# ---------------------------------------------------------------------------

class TestGenerateGuidance:
    def test_five_steps(self, catalog):
        result = generate_guidance("Sindh", "Karachi", "flood", "School Block", catalog=catalog)
        assert len(result.steps) == 5
        assert all(step.key_checks for step in result.steps)

    def test_materials_and_safety(self, catalog):
        result = generate_guidance("Punjab", "Lahore", "flood", "Masonry House", catalog=catalog)
        profile = DEFAULT_REFERENCE.structures[StructureType.MASONRY_HOUSE]
        assert result.materials == list(profile.materials)
        assert result.safety[: len(profile.baseline_safety)] == list(profile.baseline_safety)
        assert len(result.safety) == len(profile.baseline_safety) + 2
        assert "pre-monsoon readiness" in result.safety[-2]

    def test_summary_mentions_location(self, catalog):
        result = generate_guidance("GB", "Hunza", "earthquake", "Bridge Approach", catalog=catalog)
        assert "for Hunza, GB." in result.summary
        assert "Bridge Approach" in result.summary

    def test_default_coercion(self, catalog):
        coerced = generate_guidance("Nowhere", "X", "flood", "Unknown Structure", catalog=catalog)
        explicit = generate_guidance("Punjab", "X", "flood", "Masonry House", catalog=catalog)
        assert coerced.to_dict() == explicit.to_dict()

    def test_unknown_hazard_is_flood(self, catalog):
        coerced = generate_guidance("Sindh", "Sukkur", "landslide", "RC Frame", catalog=catalog)
        explicit = generate_guidance("Sindh", "Sukkur", "flood", "RC Frame", catalog=catalog)
        assert coerced.to_dict() == explicit.to_dict()

    def test_deterministic(self, catalog):
        a = generate_guidance("Balochistan", "Quetta", "earthquake", "School Block", catalog=catalog)
        b = generate_guidance("Balochistan", "Quetta", "earthquake", "School Block", catalog=catalog)
        assert a.to_dict() == b.to_dict()

    def test_peshawar_rc_frame_earthquake(self, catalog):
        result = generate_guidance("KP", "Peshawar", "earthquake", "RC Frame", catalog=catalog)
        assert result.steps[0].title == "Establish Continuous Lateral Load Path"
        assert "Peshawar, KP" in result.steps[0].description

    def test_uses_default_catalog(self):
        result = generate_guidance("Punjab", "Multan", "flood", "RC Frame")
        assert len(result.steps) == 5

    def test_max_steps_from_catalog(self):
        small = build_catalog(max_steps=2)
        result = generate_guidance("Punjab", "Multan", "flood", "RC Frame", catalog=small)
        assert len(result.steps) == 2


# ---------------------------------------------------------------------------
# generate_step_images
# ---------------------------------------------------------------------------

class TestGenerateStepImages:
    def test_one_image_per_step(self, catalog):
        guidance = generate_guidance("KP", "Swat", "flood", "RC Frame", catalog=catalog)
        images = generate_step_images("KP", "Swat", "flood", "RC Frame", guidance.steps, catalog=catalog)

        assert len(images) == len(guidance.steps)
        for image, step in zip(images, guidance.steps):
            assert image.step_title == step.title
            assert DATA_URL.match(image.image_data_url)

    def test_prompt_names_location_and_step(self, catalog):
        steps = [GuidanceStep(title="Raise Plinth", description="d", key_checks=["a"])]
        [image] = generate_step_images("Sindh", "Karachi", "flood", "School Block", steps, catalog=catalog)
        assert image.prompt == (
            "Pakistan-trained ML rendered construction visual for School Block in "
            "Karachi, Sindh (flood) - Raise Plinth"
        )

    def test_mapping_steps(self, catalog):
        steps = [
            {"title": "First", "keyChecks": ["a", "b"]},
            {"description": "no title here"},
        ]
        images = generate_step_images("Punjab", "Lahore", "flood", "Masonry House", steps, catalog=catalog)
        assert [i.step_title for i in images] == ["First", "Step 2"]

    def test_truncated_to_max_steps(self, catalog):
        steps = [{"title": f"S{i}"} for i in range(8)]
        images = generate_step_images("Punjab", "Lahore", "flood", "Masonry House", steps, catalog=catalog)
        assert [i.step_title for i in images] == ["S0", "S1", "S2", "S3", "S4"]

    def test_non_list_steps(self, catalog):
        assert generate_step_images("Punjab", "Lahore", "flood", "Masonry House", "steps", catalog=catalog) == []
        assert generate_step_images("Punjab", "Lahore", "flood", "Masonry House", None, catalog=catalog) == []

    def test_empty_steps(self, catalog):
        assert generate_step_images("Punjab", "Lahore", "flood", "Masonry House", [], catalog=catalog) == []

    def test_invalid_inputs_coerced(self, catalog):
        [image] = generate_step_images("Mars", "Lahore", "meteor", "Tent", [{"title": "T"}], catalog=catalog)
        assert "Masonry House in Lahore, Punjab (flood)" in image.prompt

    def test_unencodable_title_does_not_raise(self, catalog):
        steps = [{"title": "bad \ud800 title"}]
        [image] = generate_step_images("Punjab", "Lahore", "flood", "Masonry House", steps, catalog=catalog)
        assert DATA_URL.match(image.image_data_url)
