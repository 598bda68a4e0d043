"""Guidance pipeline — the two public entry points of the engine.

    query → defaults → inference → template ranking → narrative → result
    steps → per-step diagram

Both functions accept arbitrary strings for province, hazard and structure
type and coerce unrecognised values to Punjab / flood / Masonry House. They
never raise on bad input.
"""

import logging
import time
from collections.abc import Mapping

import mlflow
from mlflow.entities import SpanType

from hazardguide.core.types import (
    GuidanceResult,
    GuidanceStep,
    Hazard,
    Province,
    StepDiagram,
    StructureType,
)
from hazardguide.pipeline.catalog import Catalog, default_catalog
from hazardguide.pipeline.inference import infer
from hazardguide.pipeline.narrative import build_summary, enrich_step, readiness_lines
from hazardguide.pipeline.scoring import select_steps
from hazardguide.render.diagram import render

logger = logging.getLogger(__name__)


def resolve_inputs(province, city, hazard, structure_type) -> tuple[Province, str, Hazard, StructureType]:
    """Coerce raw request values to their enums, logging any defaults applied."""
    resolved = (
        Province.parse(province),
        "" if city is None else str(city).strip(),
        Hazard.parse(hazard),
        StructureType.parse(structure_type),
    )
    for name, raw, value in (
        ("province", province, resolved[0]),
        ("hazard", hazard, resolved[2]),
        ("structure_type", structure_type, resolved[3]),
    ):
        if raw != value.value:
            logger.debug("Unrecognised %s %r, using default %r", name, raw, value.value)
    return resolved


@mlflow.trace(name="generate_guidance", span_type=SpanType.CHAIN)
def generate_guidance(
    province,
    city,
    hazard,
    structure_type,
    catalog: Catalog | None = None,
) -> GuidanceResult:
    """Produce ranked, location-enriched guidance for a structure and hazard."""
    t0 = time.monotonic()
    if catalog is None:
        catalog = default_catalog()
    province, city, hazard, structure_type = resolve_inputs(province, city, hazard, structure_type)

    inference = infer(catalog, province, city, hazard, structure_type)
    templates = select_steps(catalog, inference, province, hazard, structure_type)
    steps = [
        enrich_step(template, inference, province, city, hazard, structure_type)
        for template in templates
    ]

    profile = catalog.reference.structures[structure_type]
    result = GuidanceResult(
        summary=build_summary(inference, steps, province, city, hazard, structure_type),
        materials=list(profile.materials),
        safety=list(profile.baseline_safety) + readiness_lines(hazard, catalog.reference.provinces[province]),
        steps=steps,
    )

    logger.info(
        "Guidance generated: scope=%s damage=%s, %d steps",
        inference.predicted_scope.value, inference.predicted_damage.value, len(steps),
        extra={
            "province": province.value,
            "city": city,
            "hazard": hazard.value,
            "structure_type": structure_type.value,
            "duration_ms": round((time.monotonic() - t0) * 1000, 1),
        },
    )
    return result


def _step_fields(step) -> tuple[object, object]:
    """Pull (title, key checks) from a GuidanceStep or a plain mapping."""
    if isinstance(step, GuidanceStep):
        return step.title, step.key_checks
    if isinstance(step, Mapping):
        return step.get("title"), step.get("keyChecks", step.get("key_checks"))
    return None, None


@mlflow.trace(name="generate_step_images", span_type=SpanType.CHAIN)
def generate_step_images(
    province,
    city,
    hazard,
    structure_type,
    steps,
    catalog: Catalog | None = None,
) -> list[StepDiagram]:
    """Render one annotated diagram per step, for at most ``max_steps`` steps.

    The cap wins over one-image-per-step: steps past ``catalog.max_steps``
    are dropped. Non-list ``steps`` yields an empty list.
    """
    if catalog is None:
        catalog = default_catalog()
    province, city, hazard, structure_type = resolve_inputs(province, city, hazard, structure_type)

    if not isinstance(steps, (list, tuple)):
        logger.debug("Ignoring non-list steps payload of type %s", type(steps).__name__)
        return []

    diagrams = []
    for index, step in enumerate(steps[: catalog.max_steps]):
        raw_title, key_checks = _step_fields(step)
        title = f"Step {index + 1}" if raw_title is None else str(raw_title)
        diagrams.append(StepDiagram(
            step_title=title,
            prompt=(
                f"Pakistan-trained ML rendered construction visual for {structure_type.value} in "
                f"{city}, {province.value} ({hazard.value}) - {title}"
            ),
            image_data_url=render(province, city, hazard, structure_type, title, key_checks, index),
        ))

    logger.debug(
        "Rendered %d step diagrams", len(diagrams),
        extra={"province": province.value, "city": city, "hazard": hazard.value},
    )
    return diagrams
