"""Tests for corpus generation, normalization and catalog construction."""

import dataclasses
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from hazardguide.core.reference import DEFAULT_REFERENCE
from hazardguide.core.types import Damage, Hazard, Scope, StructureType
from hazardguide.pipeline import catalog as catalog_module
from hazardguide.pipeline.catalog import (
    CatalogBuildError,
    FeatureNormalizer,
    build_catalog,
    build_training_cases,
    default_catalog,
    label_stress,
    round_half_up,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestRoundHalfUp:
    def test_halves_round_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(34.5) == 35

    def test_below_half(self):
        assert round_half_up(1.49) == 1
        assert round_half_up(0.0) == 0


class TestLabelStress:
    def test_comprehensive_above_upper_threshold(self):
        assert label_stress(0.68) == (Scope.COMPREHENSIVE, Damage.HIGH)

    def test_thresholds_are_strict(self):
        assert label_stress(0.67) == (Scope.STANDARD, Damage.MEDIUM)
        assert label_stress(0.52) == (Scope.BASIC, Damage.LOW)

    def test_basic_below_lower_threshold(self):
        assert label_stress(0.3) == (Scope.BASIC, Damage.LOW)


# ---------------------------------------------------------------------------
# Corpus
# ---------------------------------------------------------------------------

class TestTrainingCases:
    def test_full_enumeration(self):
        """16 cities x 4 structures x 2 hazards x 5 bands."""
        cases = build_training_cases(DEFAULT_REFERENCE)
        assert len(cases) == 640
        assert [c.index for c in cases] == list(range(640))

    def test_labels_are_paired(self):
        pairs = {
            Scope.BASIC: Damage.LOW,
            Scope.STANDARD: Damage.MEDIUM,
            Scope.COMPREHENSIVE: Damage.HIGH,
        }
        for case in build_training_cases(DEFAULT_REFERENCE):
            assert pairs[case.predicted_scope] is case.predicted_damage

    def test_all_classes_represented(self):
        cases = build_training_cases(DEFAULT_REFERENCE)
        assert {c.predicted_scope for c in cases} == set(Scope)

    def test_depth_score_range(self):
        for case in build_training_cases(DEFAULT_REFERENCE):
            assert 0.35 <= case.depth_score <= 0.97

    def test_case_carries_province_features(self):
        case = next(
            c for c in build_training_cases(DEFAULT_REFERENCE)
            if c.city == "Peshawar" and c.sample.hazard is Hazard.EARTHQUAKE
        )
        assert case.sample.seismic_zone == 4.1
        assert case.sample.exposure_bias == 0.67
        assert case.sample.structure_type is StructureType.MASONRY_HOUSE
        assert (case.sample.severity, case.sample.affected_area) == (34.0, 18.0)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

class TestFeatureNormalizer:
    def test_min_max_scaling(self):
        normalizer = FeatureNormalizer.fit(np.array([[0.0, 5.0], [10.0, 5.0]]))
        assert normalizer.normalize([5.0, 5.0]).tolist() == [0.5, 0.0]

    def test_constant_dimension_maps_to_zero(self):
        normalizer = FeatureNormalizer.fit(np.array([[1.0, 7.0], [3.0, 7.0]]))
        assert normalizer.normalize([2.0, 99.0]).tolist() == [0.5, 0.0]

    def test_out_of_range_not_clamped_by_default(self):
        normalizer = FeatureNormalizer.fit(np.array([[0.0], [10.0]]))
        assert normalizer.normalize([20.0]).tolist() == [2.0]
        assert normalizer.normalize([-5.0]).tolist() == [-0.5]

    def test_clamp_to_unit(self):
        normalizer = FeatureNormalizer.fit(np.array([[0.0], [10.0]]))
        assert normalizer.normalize([20.0], clamp_to_unit=True).tolist() == [1.0]
        assert normalizer.normalize([-5.0], clamp_to_unit=True).tolist() == [0.0]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestBuildCatalog:
    def test_default_catalog(self, catalog):
        assert len(catalog) == 640
        assert catalog.normalized_features.shape == (640, 12)
        assert catalog.neighbor_count == 9
        assert catalog.weight_smoothing == 0.025

    def test_training_features_within_unit_range(self, catalog):
        assert catalog.normalized_features.min() >= 0.0
        assert catalog.normalized_features.max() <= 1.0

    def test_arrays_are_read_only(self, catalog):
        with pytest.raises(ValueError):
            catalog.normalized_features[0, 0] = 5.0
        with pytest.raises(ValueError):
            catalog.normalizer.minimum[0] = 5.0

    def test_default_catalog_is_memoized(self):
        assert default_catalog() is default_catalog()

    def test_default_catalog_builds_once_under_concurrency(self, monkeypatch):
        calls = []

        def slow_build(*args, **kwargs):
            calls.append(1)
            time.sleep(0.2)
            return build_catalog(*args, **kwargs)

        monkeypatch.setattr(catalog_module, "_default_catalog", None)
        monkeypatch.setattr(catalog_module, "build_catalog", slow_build)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: catalog_module.default_catalog(), range(8)))

        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_independent_catalogs(self):
        a = build_catalog(neighbor_count=3)
        b = build_catalog(neighbor_count=15)
        assert a is not b
        assert (a.neighbor_count, b.neighbor_count) == (3, 15)
        assert np.array_equal(a.normalized_features, b.normalized_features)

    def test_single_city_has_constant_city_dimensions(self):
        reference = dataclasses.replace(
            DEFAULT_REFERENCE,
            cities={"Lahore": DEFAULT_REFERENCE.cities["Lahore"]},
        )
        single = build_catalog(reference)
        assert len(single) == 40
        # Province and city columns never vary with one city
        assert not single.normalized_features[:, 4:].any()


class TestCatalogBuildErrors:
    def test_non_positive_neighbor_count(self):
        with pytest.raises(CatalogBuildError, match="neighbor_count"):
            build_catalog(neighbor_count=0)

    def test_non_positive_smoothing(self):
        with pytest.raises(CatalogBuildError, match="weight_smoothing"):
            build_catalog(weight_smoothing=0.0)

    def test_missing_province_profile(self):
        provinces = {k: v for k, v in DEFAULT_REFERENCE.provinces.items() if k.value != "GB"}
        reference = dataclasses.replace(DEFAULT_REFERENCE, provinces=provinces)
        with pytest.raises(CatalogBuildError, match="No province profile for: GB"):
            build_catalog(reference)

    def test_structure_without_tags(self):
        structures = dict(DEFAULT_REFERENCE.structures)
        structures[StructureType.RC_FRAME] = dataclasses.replace(
            structures[StructureType.RC_FRAME], tags=frozenset(),
        )
        reference = dataclasses.replace(DEFAULT_REFERENCE, structures=structures)
        with pytest.raises(CatalogBuildError, match="RC Frame has no tags"):
            build_catalog(reference)

    def test_empty_template_library(self):
        templates = {Hazard.FLOOD: DEFAULT_REFERENCE.templates[Hazard.FLOOD], Hazard.EARTHQUAKE: ()}
        reference = dataclasses.replace(DEFAULT_REFERENCE, templates=templates)
        with pytest.raises(CatalogBuildError, match="earthquake"):
            build_catalog(reference)

    def test_empty_corpus(self):
        reference = dataclasses.replace(DEFAULT_REFERENCE, cities={})
        with pytest.raises(CatalogBuildError, match="empty training corpus"):
            build_catalog(reference)
