"""hazardguide API: FastAPI adapter over the guidance engine.

Run:
    uvicorn hazardguide.api.main:app --reload
    # or
    hazardguide-api
"""

import logging
import uuid
from contextlib import asynccontextmanager

import mlflow
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from hazardguide.api.routes import router
from hazardguide.config import settings
from hazardguide.observability.logging import correlation_id, setup_logging
from hazardguide.observability.tracing import init_tracing
from hazardguide.pipeline.catalog import default_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and tracing, then build the shared catalog.

    A catalog that fails to build aborts startup.
    """
    setup_logging(json_format=settings.log_json, level=settings.log_level)
    init_tracing()
    logger.info("Building guidance catalog...")
    catalog = default_catalog()
    logger.info("hazardguide API ready (%d training cases)", len(catalog))
    yield
    logger.info("Shutting down")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Set correlation ID from X-Request-ID header or generate a new one."""

    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get("x-request-id", str(uuid.uuid4()))
        token = correlation_id.set(cid)
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = cid
            return response
        finally:
            correlation_id.reset(token)


app = FastAPI(
    title="hazardguide",
    description="Location-aware flood and earthquake construction guidance for Pakistan.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
def health():
    """Health check: catalog availability and MLflow connectivity."""
    checks = {}
    training_cases = 0

    try:
        training_cases = len(default_catalog())
        checks["catalog"] = "ok"
    except Exception as e:
        logger.exception("Catalog unavailable")
        checks["catalog"] = f"error: {e}"

    try:
        mlflow.search_experiments(max_results=1)
        checks["mlflow"] = "ok"
    except Exception as e:
        checks["mlflow"] = f"error: {e}"

    status = "healthy" if checks["catalog"] == "ok" else "degraded"
    return {"status": status, "checks": checks, "training_cases": training_cases}


def run():
    """Entry point for hazardguide-api console script."""
    uvicorn.run("hazardguide.api.main:app", host="0.0.0.0", port=8000, reload=True)
