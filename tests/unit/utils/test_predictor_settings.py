"""Tests for predictor settings."""

import pytest
from pydantic import ValidationError

from src.utils.settings.predictor import PredictorSettings


def test_defaults_match_local_deployment():
    settings = PredictorSettings(_env_file=None)

    assert settings.predict_url == "http://127.0.0.1:8000/predict"
    assert settings.health_url == "http://127.0.0.1:8000/health"
    assert settings.FORECAST_WINDOW_SIZE == 4
    assert settings.PREDICTOR_INPUT_LENGTH == 5
    assert settings.PREDICTOR_MAX_ATTEMPTS == 3
    assert settings.PREDICTOR_BACKOFF_BASE_MS == 500


def test_reads_hosted_deployment_from_environment(monkeypatch):
    monkeypatch.setenv("PREDICTOR_BASE_URL", "https://sargazo-model.example.org/")
    monkeypatch.setenv("PREDICTOR_PREDICT_PATH", "/api/v1/predict-trajectory")
    monkeypatch.setenv("PREDICTOR_SEQUENCE_FIELD", "Sequence")
    monkeypatch.setenv("FORECAST_WINDOW_SIZE", "5")

    settings = PredictorSettings(_env_file=None)

    assert (
        settings.predict_url
        == "https://sargazo-model.example.org/api/v1/predict-trajectory"
    )
    assert settings.PREDICTOR_SEQUENCE_FIELD == "Sequence"
    assert settings.FORECAST_WINDOW_SIZE == 5


def test_input_length_shorter_than_window_is_rejected():
    with pytest.raises(ValidationError):
        PredictorSettings(
            _env_file=None, FORECAST_WINDOW_SIZE=5, PREDICTOR_INPUT_LENGTH=4
        )


def test_zero_attempts_is_rejected():
    with pytest.raises(ValidationError):
        PredictorSettings(_env_file=None, PREDICTOR_MAX_ATTEMPTS=0)
