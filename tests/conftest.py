"""Shared test fixtures."""

import mlflow
import pytest

from hazardguide.pipeline.catalog import default_catalog


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Keep MLflow tracing off during tests: no side effects, no mlruns/ or mlflow.db writes.

    Tracing is not re-enabled on teardown; enabling it without a configured
    store creates a default database in the working directory.
    """
    mlflow.tracing.disable()
    yield


@pytest.fixture(scope="session")
def catalog():
    """The process-wide catalog over the bundled reference data."""
    return default_catalog()
