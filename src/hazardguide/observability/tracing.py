"""MLflow tracing setup for the guidance pipeline.

The pipeline functions carry ``@mlflow.trace`` decorators directly. Tracing
is switched off when this module is imported, so library callers never
touch an MLflow store; ``init_tracing()`` points MLflow at the configured
store and turns tracing back on.
"""

import logging

import mlflow

from hazardguide.config import settings

logger = logging.getLogger(__name__)

mlflow.tracing.disable()


def init_tracing(tracking_uri: str | None = None, experiment_name: str | None = None) -> None:
    """Set the MLflow tracking URI and experiment, then enable tracing.

    Falls back to ``settings`` for either argument left as None. Traces are
    exported asynchronously so request latency does not include the store.
    """
    uri = tracking_uri or settings.mlflow_tracking_uri
    experiment = experiment_name or settings.mlflow_experiment_name
    mlflow.set_tracking_uri(uri)
    mlflow.set_experiment(experiment)
    mlflow.config.enable_async_logging()
    mlflow.tracing.enable()
    logger.info("MLflow tracing to %s (experiment %s)", uri, experiment)
