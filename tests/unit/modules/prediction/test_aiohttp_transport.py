"""Predictor client against a real aiohttp server."""

import pytest
import pytest_asyncio
from aiohttp import ClientSession, test_utils, web

from src.modules.prediction.errors import PredictorProtocolError, PredictorUnavailable
from src.modules.prediction.infrastructure.predictor_client import (
    AiohttpPredictorTransport,
    PredictorClient,
)
from src.modules.prediction.models import PredictionRequest
from src.utils.settings.predictor import PredictorSettings


class FakePredictor:
    """Predictor that fails a configurable number of times before answering."""

    def __init__(self, failures: int = 0):
        self.failures = failures
        self.bodies: list[dict] = []

    async def predict(self, request: web.Request) -> web.Response:
        self.bodies.append(await request.json())
        if self.failures > 0:
            self.failures -= 1
            return web.json_response({"detail": "overloaded"}, status=503)
        last_lat, last_lon = self.bodies[-1]["sequence"][-1]
        return web.json_response(
            {"Latitud_siguiente": last_lat - 0.001, "Longitud_siguiente": last_lon}
        )

    async def health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok"})


async def no_sleep(_delay: float) -> None:
    return None


@pytest.fixture
def fake_predictor() -> FakePredictor:
    return FakePredictor(failures=1)


@pytest_asyncio.fixture
async def predictor_server(fake_predictor):
    app = web.Application()
    app.router.add_post("/predict", fake_predictor.predict)
    app.router.add_get("/health", fake_predictor.health)
    server = test_utils.TestServer(app)
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def live_client(predictor_server):
    settings = PredictorSettings(
        _env_file=None,
        PREDICTOR_BASE_URL=f"http://{predictor_server.host}:{predictor_server.port}",
    )
    async with ClientSession() as session:
        yield PredictorClient(
            settings, AiohttpPredictorTransport(session), sleep=no_sleep
        )


@pytest.mark.asyncio
async def test_retries_server_error_then_parses(live_client, fake_predictor):
    request = PredictionRequest(sequence=[[21.0, -89.0], [21.1, -89.1]])

    response = await live_client.call_with_retry(request)

    assert response.next_latitude == pytest.approx(21.099)
    assert response.next_longitude == pytest.approx(-89.1)
    assert len(fake_predictor.bodies) == 2
    assert fake_predictor.bodies[0] == fake_predictor.bodies[1]


@pytest.mark.asyncio
async def test_health_endpoint(live_client):
    assert await live_client.check_health() is True


@pytest.mark.asyncio
async def test_connection_refused_exhausts_retries():
    settings = PredictorSettings(
        _env_file=None,
        PREDICTOR_BASE_URL="http://127.0.0.1:9",
        PREDICTOR_TIMEOUT_SECONDS=2,
    )
    async with ClientSession() as session:
        client = PredictorClient(
            settings, AiohttpPredictorTransport(session), sleep=no_sleep
        )
        with pytest.raises(PredictorUnavailable) as exc_info:
            await client.call_with_retry(PredictionRequest(sequence=[[21.0, -89.0]]))

    assert exc_info.value.attempts == 3


UNDECODABLE_BODY = b"\xff\xfe\xfa bad"


@pytest_asyncio.fixture
async def undecodable_predictor():
    """Predictor answering with non-UTF-8 bytes at a status set per test."""
    state = {"status": 200, "calls": 0}

    async def predict(request: web.Request) -> web.Response:
        state["calls"] += 1
        return web.Response(
            body=UNDECODABLE_BODY,
            status=state["status"],
            content_type="application/json",
        )

    app = web.Application()
    app.router.add_post("/predict", predict)
    server = test_utils.TestServer(app)
    await server.start_server()
    settings = PredictorSettings(
        _env_file=None,
        PREDICTOR_BASE_URL=f"http://{server.host}:{server.port}",
    )
    async with ClientSession() as session:
        client = PredictorClient(
            settings, AiohttpPredictorTransport(session), sleep=no_sleep
        )
        yield client, state
    await server.close()


@pytest.mark.asyncio
async def test_undecodable_error_body_is_retried(undecodable_predictor):
    client, state = undecodable_predictor
    state["status"] = 503

    with pytest.raises(PredictorUnavailable) as exc_info:
        await client.call_with_retry(PredictionRequest(sequence=[[21.0, -89.0]]))

    assert exc_info.value.attempts == 3
    assert state["calls"] == 3


@pytest.mark.asyncio
async def test_undecodable_success_body_is_protocol_error(undecodable_predictor):
    client, state = undecodable_predictor

    with pytest.raises(PredictorProtocolError) as exc_info:
        await client.call_with_retry(PredictionRequest(sequence=[[21.0, -89.0]]))

    assert state["calls"] == 1
    assert exc_info.value.raw_body.endswith(" bad")
