"""Synthetic training corpus and feature normalization.

The corpus enumerates every city x structure x hazard x severity band and
labels each case from a weighted stress index. It is built once, together
with the per-dimension min/max table, into an immutable ``Catalog`` that is
passed by reference into every inference call.

Pure functions, no I/O.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass, field

import numpy as np

from hazardguide.config import settings
from hazardguide.core.reference import DEFAULT_REFERENCE, ReferenceData
from hazardguide.core.types import (
    Damage,
    Hazard,
    Province,
    ProvinceProfile,
    QuerySample,
    Scope,
    StructureType,
    TrainingCase,
)

logger = logging.getLogger(__name__)

# Severity and affected-area bands are paired positionally.
SEVERITY_BANDS = (34, 46, 58, 71, 84)
AREA_BANDS = (18, 26, 34, 43, 54)

COMPREHENSIVE_THRESHOLD = 0.67
STANDARD_THRESHOLD = 0.52

CORPUS_DEPTH_RANGE = (0.35, 0.97)


class CatalogBuildError(RuntimeError):
    """Reference data cannot produce a usable corpus."""


def clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def hazard_intensity(hazard: Hazard, province: ProvinceProfile) -> float:
    """Province-level intensity of the hazard, roughly in [0, 1]."""
    if hazard is Hazard.FLOOD:
        return province.flood_risk * 0.66 + province.monsoon_index * 0.34
    return province.seismic_zone / 5


def stress_index(severity: float, affected_area: float, intensity: float, soil_instability: float) -> float:
    return (
        severity / 100 * 0.45
        + affected_area / 100 * 0.25
        + intensity * 0.2
        + soil_instability * 0.1
    )


def label_stress(stress: float) -> tuple[Scope, Damage]:
    """Map a stress index to (scope, damage) with shared thresholds."""
    if stress > COMPREHENSIVE_THRESHOLD:
        return Scope.COMPREHENSIVE, Damage.HIGH
    if stress > STANDARD_THRESHOLD:
        return Scope.STANDARD, Damage.MEDIUM
    return Scope.BASIC, Damage.LOW


def build_training_cases(reference: ReferenceData) -> tuple[TrainingCase, ...]:
    """Enumerate and label every city x structure x hazard x band combination."""
    cases: list[TrainingCase] = []

    for city, city_profile in reference.cities.items():
        province_profile = reference.provinces[city_profile.province]

        for structure_type in reference.structures:
            for hazard in Hazard:
                intensity = hazard_intensity(hazard, province_profile)

                for severity, area in zip(SEVERITY_BANDS, AREA_BANDS):
                    stress = stress_index(severity, area, intensity, province_profile.soil_instability)
                    scope, damage = label_stress(stress)
                    sample = QuerySample(
                        structure_type=structure_type,
                        hazard=hazard,
                        severity=float(severity),
                        affected_area=float(area),
                        seismic_zone=province_profile.seismic_zone,
                        flood_risk=province_profile.flood_risk,
                        monsoon_index=province_profile.monsoon_index,
                        soil_instability=province_profile.soil_instability,
                        logistics=province_profile.logistics,
                        labor_index=city_profile.labor_index,
                        material_index=city_profile.material_index,
                        exposure_bias=city_profile.exposure_bias,
                    )
                    cases.append(TrainingCase(
                        index=len(cases),
                        city=city,
                        province=city_profile.province,
                        sample=sample,
                        predicted_scope=scope,
                        predicted_damage=damage,
                        depth_score=clamp(*CORPUS_DEPTH_RANGE, 0.32 + stress),
                    ))

    return tuple(cases)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class FeatureNormalizer:
    """Per-dimension min/max scaling fitted on the training corpus only."""

    minimum: np.ndarray
    maximum: np.ndarray

    @classmethod
    def fit(cls, features: np.ndarray) -> "FeatureNormalizer":
        minimum = features.min(axis=0)
        maximum = features.max(axis=0)
        minimum.setflags(write=False)
        maximum.setflags(write=False)
        return cls(minimum=minimum, maximum=maximum)

    def normalize(self, features, clamp_to_unit: bool = False) -> np.ndarray:
        """Scale a vector (or row matrix) to (v - min) / (max - min).

        Constant dimensions map to 0. Values outside the fitted range land
        outside [0, 1] unless ``clamp_to_unit`` is set.
        """
        values = np.asarray(features, dtype=float)
        span = self.maximum - self.minimum
        constant = span == 0
        scaled = (values - self.minimum) / np.where(constant, 1.0, span)
        scaled = np.where(constant, 0.0, scaled)
        if clamp_to_unit:
            scaled = np.clip(scaled, 0.0, 1.0)
        return scaled


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Catalog:
    """Reference data, labelled corpus and normalization table, built once.

    Read-only after construction, so one instance may be shared by any
    number of concurrent requests.
    """

    reference: ReferenceData = field(repr=False)
    cases: tuple[TrainingCase, ...] = field(repr=False)
    normalizer: FeatureNormalizer = field(repr=False)
    normalized_features: np.ndarray = field(repr=False)
    neighbor_count: int = 9
    weight_smoothing: float = 0.025
    clamp_query_features: bool = False
    max_steps: int = 5

    def __len__(self) -> int:
        return len(self.cases)


def build_catalog(
    reference: ReferenceData = DEFAULT_REFERENCE,
    *,
    neighbor_count: int = 9,
    weight_smoothing: float = 0.025,
    clamp_query_features: bool = False,
    max_steps: int = 5,
) -> Catalog:
    """Validate the reference tables, build the corpus and fit the normalizer.

    Raises:
        CatalogBuildError: if the reference data or parameters are unusable.
    """
    t0 = time.monotonic()
    _validate(reference, neighbor_count, weight_smoothing, max_steps)

    cases = build_training_cases(reference)
    if not cases:
        raise CatalogBuildError("Reference data produced an empty training corpus")

    features = np.array([case.sample.feature_vector() for case in cases], dtype=float)
    normalizer = FeatureNormalizer.fit(features)
    normalized = normalizer.normalize(features)
    normalized.setflags(write=False)

    catalog = Catalog(
        reference=reference,
        cases=cases,
        normalizer=normalizer,
        normalized_features=normalized,
        neighbor_count=neighbor_count,
        weight_smoothing=weight_smoothing,
        clamp_query_features=clamp_query_features,
        max_steps=max_steps,
    )
    logger.info(
        "Catalog built: %d training cases from %d cities",
        len(cases), len(reference.cities),
        extra={"duration_ms": round((time.monotonic() - t0) * 1000, 1)},
    )
    return catalog


def _validate(reference: ReferenceData, neighbor_count: int, weight_smoothing: float, max_steps: int) -> None:
    if neighbor_count < 1:
        raise CatalogBuildError(f"neighbor_count must be >= 1, got {neighbor_count}")
    if weight_smoothing <= 0:
        raise CatalogBuildError(f"weight_smoothing must be > 0, got {weight_smoothing}")
    if max_steps < 1:
        raise CatalogBuildError(f"max_steps must be >= 1, got {max_steps}")

    missing_structures = [s.value for s in StructureType if s not in reference.structures]
    if missing_structures:
        raise CatalogBuildError(f"No structure profile for: {', '.join(missing_structures)}")

    missing_provinces = [p.value for p in Province if p not in reference.provinces]
    if missing_provinces:
        raise CatalogBuildError(f"No province profile for: {', '.join(missing_provinces)}")

    for structure_type, profile in reference.structures.items():
        if not profile.tags:
            raise CatalogBuildError(f"Structure type {structure_type.value} has no tags")

    for city, profile in reference.cities.items():
        if profile.province not in reference.provinces:
            raise CatalogBuildError(f"City {city} references unknown province {profile.province.value}")

    for hazard in Hazard:
        if not reference.templates.get(hazard):
            raise CatalogBuildError(f"Empty guidance template library for hazard {hazard.value}")


_default_catalog: Catalog | None = None
_default_lock = threading.Lock()


def default_catalog() -> Catalog:
    """The process-wide catalog over the bundled reference data.

    Built once from ``settings`` on first use and never rebuilt. Concurrent
    first callers wait on a lock and all receive the same instance.
    """
    global _default_catalog
    if _default_catalog is None:
        with _default_lock:
            if _default_catalog is None:
                _default_catalog = build_catalog(
                    DEFAULT_REFERENCE,
                    neighbor_count=settings.neighbor_count,
                    weight_smoothing=settings.weight_smoothing,
                    clamp_query_features=settings.clamp_query_features,
                    max_steps=settings.max_steps,
                )
    return _default_catalog
