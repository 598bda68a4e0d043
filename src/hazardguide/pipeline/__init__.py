"""Guidance pipeline — corpus, inference, scoring, narrative and entry points."""

from hazardguide.pipeline.catalog import Catalog, CatalogBuildError, build_catalog, default_catalog
from hazardguide.pipeline.guidance import generate_guidance, generate_step_images
from hazardguide.pipeline.inference import infer

__all__ = [
    "Catalog",
    "CatalogBuildError",
    "build_catalog",
    "default_catalog",
    "generate_guidance",
    "generate_step_images",
    "infer",
]
