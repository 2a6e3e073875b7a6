"""Global test configuration and fixtures for the forecast API."""

import json
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.core.dependencies import get_predictor_client
from src.modules.prediction.infrastructure.predictor_client import (
    PredictorClient,
    TransportResponse,
)
from src.utils.settings.predictor import PredictorSettings, get_predictor_settings


class StubTransport:
    """Scripted predictor transport.

    Each queued outcome is either a TransportResponse, a JSON-able dict (sent
    back as a 200) or an exception instance to raise.
    """

    def __init__(self, outcomes: list[Any] | None = None):
        self.outcomes = list(outcomes or [])
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.health_outcome: Any = TransportResponse(200, '{"status": "ok"}')
        self.health_calls: list[str] = []

    def queue(self, *outcomes: Any) -> "StubTransport":
        self.outcomes.extend(outcomes)
        return self

    async def post_json(
        self, url: str, payload: dict[str, Any], timeout: float
    ) -> TransportResponse:
        self.calls.append((url, payload))
        if not self.outcomes:
            raise AssertionError("StubTransport ran out of scripted outcomes")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, dict):
            return TransportResponse(200, json.dumps(outcome))
        return outcome

    async def get(self, url: str, timeout: float) -> TransportResponse:
        self.health_calls.append(url)
        if isinstance(self.health_outcome, BaseException):
            raise self.health_outcome
        return self.health_outcome

    @property
    def sequences(self) -> list[list[list[float]]]:
        """Sequences sent on every predict call, in order."""
        return [payload["sequence"] for _, payload in self.calls]


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays without waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def predictor_settings() -> PredictorSettings:
    """Predictor settings pinned for tests, independent of any .env file."""
    return PredictorSettings(
        _env_file=None,
        PREDICTOR_BASE_URL="http://predictor.test",
        PREDICTOR_PREDICT_PATH="/predict",
        PREDICTOR_HEALTH_PATH="/health",
        PREDICTOR_TIMEOUT_SECONDS=5,
        PREDICTOR_MAX_ATTEMPTS=3,
        PREDICTOR_BACKOFF_BASE_MS=500,
        PREDICTOR_SEQUENCE_FIELD="sequence",
        PREDICTOR_LATITUDE_FIELD="Latitud_siguiente",
        PREDICTOR_LONGITUDE_FIELD="Longitud_siguiente",
        FORECAST_WINDOW_SIZE=4,
        PREDICTOR_INPUT_LENGTH=5,
        FORECAST_REQUEST_TIMEOUT_SECONDS=10,
        FORECAST_DISCONNECT_POLL_SECONDS=0.05,
    )


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def predictor_client(
    predictor_settings: PredictorSettings,
    stub_transport: StubTransport,
    recording_sleep: RecordingSleep,
) -> PredictorClient:
    return PredictorClient(predictor_settings, stub_transport, sleep=recording_sleep)


@pytest_asyncio.fixture
async def app(
    predictor_settings: PredictorSettings, predictor_client: PredictorClient
) -> AsyncGenerator[FastAPI, None]:
    """Create FastAPI application with lifespan manager for testing."""
    from src.main import app

    app.dependency_overrides[get_predictor_settings] = lambda: predictor_settings
    app.dependency_overrides[get_predictor_client] = lambda: predictor_client

    async with LifespanManager(app):
        yield app

    app.dependency_overrides.clear()


# HTTP Client Fixtures
@pytest_asyncio.fixture
async def public_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create HTTP client for testing public endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test-forecast-api",
    ) as client:
        yield client
