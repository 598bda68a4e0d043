"""Pydantic request/response models for the hazardguide API.

These are the API contract, decoupled from the engine dataclasses. JSON
field names are camelCase; Python attribute names stay snake_case. Route
handlers bridge the two through the dataclasses' ``to_dict()``.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GuidanceRequest(CamelModel):
    """Request body for POST /api/guidance/construction.

    Unrecognised province, hazard or structure values are not rejected;
    the engine substitutes its documented defaults.
    """

    province: str = Field(default="Punjab", examples=["KP"])
    city: str = Field(default="Lahore", examples=["Peshawar"])
    hazard: str = Field(default="flood", examples=["earthquake"])
    structure_type: str = Field(default="Masonry House", examples=["RC Frame"])
    # Accepted for compatibility with existing clients; does not affect the result
    best_practice_name: str | None = None


class StepInput(CamelModel):
    title: str | None = None
    description: str = ""
    key_checks: list[str] = []


class StepImagesRequest(GuidanceRequest):
    """Request body for POST /api/guidance/step-images."""

    steps: list[StepInput] = []


class StepResponse(CamelModel):
    title: str
    description: str
    key_checks: list[str] = []


class GuidanceResponse(CamelModel):
    """Full guidance package for one location, hazard and structure."""

    summary: str
    materials: list[str] = []
    safety: list[str] = []
    steps: list[StepResponse] = []


class StepImageResponse(CamelModel):
    step_title: str
    prompt: str
    image_data_url: str


class StepImagesResponse(CamelModel):
    images: list[StepImageResponse] = []


class CityEntry(CamelModel):
    name: str
    province: str


class CatalogResponse(CamelModel):
    """Selectable values for guidance request forms."""

    provinces: list[str]
    cities: list[CityEntry]
    structure_types: list[str]
    hazards: list[str]


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    error_type: str = "engine_error"
