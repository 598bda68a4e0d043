"""hazardguide: location-aware flood and earthquake construction guidance for Pakistan."""

# Imported first so tracing stays off until init_tracing() is called
from hazardguide.observability.tracing import init_tracing
from hazardguide.pipeline import (
    build_catalog,
    default_catalog,
    generate_guidance,
    generate_step_images,
)

__all__ = ["build_catalog", "default_catalog", "generate_guidance", "generate_step_images", "init_tracing"]
