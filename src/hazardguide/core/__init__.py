"""Core domain types shared across all hazardguide modules."""

from hazardguide.core.types import (
    CityProfile,
    Damage,
    GuidanceResult,
    GuidanceStep,
    GuidanceTemplate,
    Hazard,
    InferenceResult,
    Province,
    ProvinceProfile,
    QuerySample,
    Scope,
    StepDiagram,
    StructureProfile,
    StructureType,
    TrainingCase,
)

__all__ = [
    "CityProfile",
    "Damage",
    "GuidanceResult",
    "GuidanceStep",
    "GuidanceTemplate",
    "Hazard",
    "InferenceResult",
    "Province",
    "ProvinceProfile",
    "QuerySample",
    "Scope",
    "StepDiagram",
    "StructureProfile",
    "StructureType",
    "TrainingCase",
]
