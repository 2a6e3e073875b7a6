"""Prediction microservice settings configuration."""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PredictorSettings(BaseSettings):
    """Connection and wire contract of the external coordinate predictor.

    Deployments disagree on window capacity, request field casing and
    response field names, so every one of them is pinned here instead of
    being inferred at runtime.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    PREDICTOR_BASE_URL: str = "http://127.0.0.1:8000"
    PREDICTOR_PREDICT_PATH: str = "/predict"
    PREDICTOR_HEALTH_PATH: str = "/health"
    PREDICTOR_TIMEOUT_SECONDS: float = 30.0

    # Retry policy
    PREDICTOR_MAX_ATTEMPTS: int = 3
    PREDICTOR_BACKOFF_BASE_MS: int = 500

    # Wire contract
    PREDICTOR_SEQUENCE_FIELD: str = "sequence"
    PREDICTOR_LATITUDE_FIELD: str = "Latitud_siguiente"
    PREDICTOR_LONGITUDE_FIELD: str = "Longitud_siguiente"

    # Sliding window
    FORECAST_WINDOW_SIZE: int = 4
    PREDICTOR_INPUT_LENGTH: int = 5

    # Per-request limits
    FORECAST_REQUEST_TIMEOUT_SECONDS: float = 120.0
    FORECAST_DISCONNECT_POLL_SECONDS: float = 0.5

    @model_validator(mode="after")
    def check_window_contract(self) -> "PredictorSettings":
        if self.FORECAST_WINDOW_SIZE < 1:
            raise ValueError("FORECAST_WINDOW_SIZE must be at least 1")
        if self.PREDICTOR_INPUT_LENGTH < self.FORECAST_WINDOW_SIZE:
            raise ValueError(
                "PREDICTOR_INPUT_LENGTH must be >= FORECAST_WINDOW_SIZE"
            )
        if self.PREDICTOR_MAX_ATTEMPTS < 1:
            raise ValueError("PREDICTOR_MAX_ATTEMPTS must be at least 1")
        return self

    @property
    def predict_url(self) -> str:
        return f"{self.PREDICTOR_BASE_URL.rstrip('/')}{self.PREDICTOR_PREDICT_PATH}"

    @property
    def health_url(self) -> str:
        return f"{self.PREDICTOR_BASE_URL.rstrip('/')}{self.PREDICTOR_HEALTH_PATH}"


@lru_cache
def get_predictor_settings() -> PredictorSettings:
    """Load predictor settings once per process."""
    return PredictorSettings()
