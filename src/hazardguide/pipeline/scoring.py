"""Template scoring — rank the hazard's guidance library against an inference.

score = base * (0.75 + scope*0.2 + damage*0.12) + structure + hazard + exposure

Ties are broken by template id so the ranking is reproducible.
"""

from dataclasses import dataclass

import mlflow
from mlflow.entities import SpanType

from hazardguide.core.types import (
    Damage,
    GuidanceTemplate,
    Hazard,
    InferenceResult,
    Province,
    Scope,
    StructureType,
)
from hazardguide.pipeline.catalog import Catalog

SCOPE_FACTOR = {Scope.BASIC: 0.92, Scope.STANDARD: 1.12, Scope.COMPREHENSIVE: 1.34}
DAMAGE_FACTOR = {Damage.LOW: 0.36, Damage.MEDIUM: 0.58, Damage.HIGH: 0.81}

STRUCTURE_MATCH_BOOST = 0.08
STRUCTURE_MISS_BOOST = 0.02
HAZARD_TAG_BOOST = 0.1


@dataclass(frozen=True)
class ScoredTemplate:
    template: GuidanceTemplate
    score: float


def exposure_boost(catalog: Catalog, province: Province, hazard: Hazard) -> float:
    profile = catalog.reference.provinces[province]
    if hazard is Hazard.FLOOD:
        return profile.flood_risk * 0.07 + profile.monsoon_index * 0.05
    return profile.seismic_zone / 5 * 0.09 + profile.soil_instability * 0.04


def score_template(
    catalog: Catalog,
    template: GuidanceTemplate,
    inference: InferenceResult,
    province: Province,
    hazard: Hazard,
    structure_type: StructureType,
) -> float:
    structure_tags = catalog.reference.structures[structure_type].tags
    multiplier = (
        0.75
        + SCOPE_FACTOR[inference.predicted_scope] * 0.2
        + DAMAGE_FACTOR[inference.predicted_damage] * 0.12
    )
    structure_boost = STRUCTURE_MATCH_BOOST if template.tags & structure_tags else STRUCTURE_MISS_BOOST
    hazard_boost = HAZARD_TAG_BOOST if hazard.value in template.tags else 0.0

    return (
        template.base_score * multiplier
        + structure_boost
        + hazard_boost
        + exposure_boost(catalog, province, hazard)
    )


def rank_templates(
    catalog: Catalog,
    inference: InferenceResult,
    province: Province,
    hazard: Hazard,
    structure_type: StructureType,
) -> list[ScoredTemplate]:
    """Score every template in the hazard's library, best first."""
    scored = [
        ScoredTemplate(
            template=template,
            score=score_template(catalog, template, inference, province, hazard, structure_type),
        )
        for template in catalog.reference.templates[hazard]
    ]
    return sorted(scored, key=lambda s: (-s.score, s.template.id))


@mlflow.trace(name="select_steps", span_type=SpanType.TOOL)
def select_steps(
    catalog: Catalog,
    inference: InferenceResult,
    province: Province,
    hazard: Hazard,
    structure_type: StructureType,
) -> list[GuidanceTemplate]:
    """Top ``catalog.max_steps`` templates (fewer if the library is smaller)."""
    ranked = rank_templates(catalog, inference, province, hazard, structure_type)
    return [s.template for s in ranked[: catalog.max_steps]]
