"""Tests for the bundled reference tables and city resolution."""

import dataclasses

import pytest

from hazardguide.core.reference import DEFAULT_REFERENCE, FALLBACK_CITY_INDICES
from hazardguide.core.types import Hazard, Province, StructureType


class TestTables:
    def test_every_enum_member_has_a_profile(self):
        assert set(DEFAULT_REFERENCE.structures) == set(StructureType)
        assert set(DEFAULT_REFERENCE.provinces) == set(Province)

    def test_sixteen_cities(self):
        assert len(DEFAULT_REFERENCE.cities) == 16
        assert DEFAULT_REFERENCE.cities_in(Province.KP) == ["Peshawar", "Mardan", "Swat"]

    def test_five_templates_per_hazard(self):
        for hazard in Hazard:
            templates = DEFAULT_REFERENCE.templates[hazard]
            assert len(templates) == 5
            assert all(hazard.value in t.tags for t in templates)

    def test_structure_tags(self):
        assert DEFAULT_REFERENCE.structures[StructureType.SCHOOL_BLOCK].tags == {"school", "rc"}
        assert DEFAULT_REFERENCE.structures[StructureType.BRIDGE_APPROACH].tags == {"bridge"}

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_REFERENCE.cities["Atlantis"] = DEFAULT_REFERENCE.cities["Lahore"]


class TestResolveCity:
    def test_known_city(self):
        profile = DEFAULT_REFERENCE.resolve_city(Province.KP, "Peshawar")
        assert profile.exposure_bias == 0.67
        assert profile.province is Province.KP

    def test_unknown_city_averages_province(self):
        """Sindh cities: Karachi 0.74, Hyderabad 0.7, Sukkur 0.66 exposure."""
        profile = DEFAULT_REFERENCE.resolve_city(Province.SINDH, "Atlantis")
        assert profile.exposure_bias == pytest.approx(0.7)
        assert profile.labor_index == pytest.approx((0.86 + 0.69 + 0.67) / 3)
        assert profile.province is Province.SINDH

    def test_province_without_cities_uses_fallback(self):
        reference = dataclasses.replace(
            DEFAULT_REFERENCE,
            cities={"Lahore": DEFAULT_REFERENCE.cities["Lahore"]},
        )
        profile = reference.resolve_city(Province.GB, "Nowhere")
        assert profile.exposure_bias == FALLBACK_CITY_INDICES["exposure_bias"]
        assert profile.labor_index == FALLBACK_CITY_INDICES["labor_index"]
        assert profile.province is Province.GB
