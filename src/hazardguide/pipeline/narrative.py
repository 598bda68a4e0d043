"""Location-enriched step descriptions, readiness lines, and the summary.

Pure string composition over an inference result and resolved location.
"""

from hazardguide.core.types import (
    Damage,
    GuidanceStep,
    GuidanceTemplate,
    Hazard,
    InferenceResult,
    Province,
    ProvinceProfile,
    Scope,
    StructureType,
)
from hazardguide.pipeline.catalog import round_half_up

INTENSITY_TEXT = {
    Scope.COMPREHENSIVE: "high-intensity intervention window",
    Scope.STANDARD: "moderate intervention window",
    Scope.BASIC: "targeted intervention window",
}

RISK_TEXT = {
    Damage.HIGH: "risk concentration is high, so life-safety controls should precede all secondary works",
    Damage.MEDIUM: "risk concentration is moderate and staged sequencing will improve execution quality",
    Damage.LOW: "risk concentration is lower, allowing preventive strengthening to be prioritized",
}

SCOPE_RECOMMENDATION = {
    Scope.COMPREHENSIVE: (
        "Recommended execution mode is comprehensive, with strict sequencing of structural, "
        "utility, and safety packages."
    ),
    Scope.STANDARD: (
        "Recommended execution mode is standard, combining critical strengthening with "
        "targeted preventive upgrades."
    ),
    Scope.BASIC: (
        "Recommended execution mode is basic-targeted, emphasizing high-impact low-regret "
        "strengthening actions."
    ),
}

SIGNAL_TEXT = {
    Hazard.FLOOD: "monsoon/flood exposure signals",
    Hazard.EARTHQUAKE: "seismic and soil response signals",
}

DEMAND_TEXT = {
    Hazard.FLOOD: "elevated flood/monsoon pressure",
    Hazard.EARTHQUAKE: "elevated seismic demand",
}


def enrich_step(
    template: GuidanceTemplate,
    inference: InferenceResult,
    province: Province,
    city: str,
    hazard: Hazard,
    structure_type: StructureType,
) -> GuidanceStep:
    """Append the local intensity/risk sentence and QA directive to a template."""
    local = (
        f"In {city}, {province.value}, {SIGNAL_TEXT[hazard]} suggest a "
        f"{INTENSITY_TEXT[inference.predicted_scope]}; {RISK_TEXT[inference.predicted_damage]}."
    )
    qa = (
        f"For {structure_type.value}, execute this step with measurable QA records "
        "at the end of each work package."
    )
    return GuidanceStep(
        title=template.title,
        description=f"{template.description} {local} {qa}",
        key_checks=list(template.key_checks),
    )


def readiness_lines(hazard: Hazard, profile: ProvinceProfile) -> list[str]:
    """Hazard-specific safety lines appended to the structure baseline."""
    if hazard is Hazard.FLOOD:
        weeks = 8 if profile.monsoon_index > 0.65 else 6
        return [
            f"Trigger pre-monsoon readiness at least {weeks} weeks before peak rainfall window.",
            "Inspect drainage and backflow controls after each heavy rainfall event above local threshold.",
        ]
    return [
        f"Apply enhanced seismic inspection cycle for zone intensity {profile.seismic_zone:.1f} conditions.",
        "Anchor non-structural life-safety components before structural retrofit handover.",
    ]


def build_summary(
    inference: InferenceResult,
    steps: list[GuidanceStep],
    province: Province,
    city: str,
    hazard: Hazard,
    structure_type: StructureType,
) -> str:
    """Executive summary: framing, first step, scope mode, depth and confidence."""
    primary_action = steps[0].title if steps else "priority intervention"
    depth = round_half_up(inference.depth_score * 100)
    confidence = round_half_up(inference.evidence_strength * 100)

    return (
        f"Pakistan-trained location model estimates {DEMAND_TEXT[hazard]} for {city}, {province.value}. "
        f"This guidance is optimized for {structure_type.value} using nearest-neighbor learning from "
        "Pakistan city/province construction risk profiles and historical pattern synthesis. "
        f"Prioritize {primary_action.lower()} first, then execute downstream steps with stage-wise QA "
        f"and safety gates. {SCOPE_RECOMMENDATION[inference.predicted_scope]} "
        f"Model depth score: {depth}/100, location confidence: {confidence}/100."
    )
