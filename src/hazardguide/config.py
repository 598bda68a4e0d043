"""hazardguide configuration — engine tuning, logging, and service settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Nearest-neighbour tuning. Both change prediction smoothness.
    neighbor_count: int = Field(default=9, ge=1)
    weight_smoothing: float = Field(default=0.025, gt=0)

    # Out-of-range query features normalize outside [0, 1] unless clamped.
    clamp_query_features: bool = False

    # Guidance steps returned and step diagrams rendered per request
    max_steps: int = Field(default=5, ge=1)

    # MLflow: local SQLite store for development
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "hazardguide"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = {"env_file": ".env", "env_prefix": "HAZARDGUIDE_", "extra": "ignore"}


settings = Settings()
