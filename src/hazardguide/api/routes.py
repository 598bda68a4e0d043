"""API route handlers for hazardguide.

POST /api/guidance/construction: ranked guidance for a location
POST /api/guidance/step-images: one SVG diagram per guidance step
GET  /api/guidance/catalog: selectable provinces, cities, structures, hazards

Handlers are plain ``def`` functions: the engine is synchronous and
CPU-bound, so FastAPI runs them in its thread pool.
"""

import logging

from fastapi import APIRouter, HTTPException

from hazardguide.api.schemas import (
    CatalogResponse,
    CityEntry,
    ErrorResponse,
    GuidanceRequest,
    GuidanceResponse,
    StepImagesRequest,
    StepImagesResponse,
)
from hazardguide.core.types import Hazard, Province, StructureType
from hazardguide.pipeline.catalog import default_catalog
from hazardguide.pipeline.guidance import generate_guidance, generate_step_images

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/guidance", tags=["guidance"])


@router.post(
    "/construction",
    response_model=GuidanceResponse,
    responses={500: {"model": ErrorResponse, "description": "Engine error"}},
)
def construction_guidance(request: GuidanceRequest):
    """Generate ranked, location-aware construction guidance."""
    try:
        result = generate_guidance(request.province, request.city, request.hazard, request.structure_type)
    except Exception as e:
        logger.exception(
            "Guidance generation failed",
            extra={"province": request.province, "city": request.city, "hazard": request.hazard},
        )
        raise HTTPException(status_code=500, detail=str(e))

    return GuidanceResponse.model_validate(result.to_dict())


@router.post(
    "/step-images",
    response_model=StepImagesResponse,
    responses={500: {"model": ErrorResponse, "description": "Engine error"}},
)
def step_images(request: StepImagesRequest):
    """Render an annotated diagram for each submitted step."""
    steps = [step.model_dump(by_alias=True) for step in request.steps]
    try:
        diagrams = generate_step_images(
            request.province, request.city, request.hazard, request.structure_type, steps,
        )
    except Exception as e:
        logger.exception(
            "Step image rendering failed",
            extra={"province": request.province, "city": request.city, "hazard": request.hazard},
        )
        raise HTTPException(status_code=500, detail=str(e))

    return StepImagesResponse.model_validate({"images": [d.to_dict() for d in diagrams]})


@router.get("/catalog", response_model=CatalogResponse)
def guidance_catalog():
    """List the values a guidance form can offer."""
    reference = default_catalog().reference
    return CatalogResponse(
        provinces=[p.value for p in Province],
        cities=[
            CityEntry(name=name, province=profile.province.value)
            for name, profile in reference.cities.items()
        ],
        structure_types=[s.value for s in StructureType],
        hazards=[h.value for h in Hazard],
    )
