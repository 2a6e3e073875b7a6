"""Client for the remote coordinate prediction microservice."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from src.modules.prediction.errors import (
    PredictorProtocolError,
    PredictorTransportError,
    PredictorUnavailable,
)
from src.modules.prediction.models import PredictionRequest, PredictionResponse
from src.utils.logger import get_logger
from src.utils.settings.predictor import PredictorSettings


logger = get_logger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status and raw body of one HTTP exchange."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class PredictorTransport(Protocol):
    """HTTP capability the predictor client needs.

    Implementations raise ``aiohttp.ClientError`` or ``asyncio.TimeoutError``
    when no response could be obtained.
    """

    async def post_json(
        self, url: str, payload: dict[str, Any], timeout: float
    ) -> TransportResponse: ...

    async def get(self, url: str, timeout: float) -> TransportResponse: ...


async def _read_response(response: aiohttp.ClientResponse) -> TransportResponse:
    # Undecodable bytes must still reach the status and body checks
    body = await response.read()
    return TransportResponse(response.status, body.decode("utf-8", errors="replace"))


class AiohttpPredictorTransport:
    """Transport backed by a shared ``aiohttp.ClientSession``."""

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def post_json(
        self, url: str, payload: dict[str, Any], timeout: float
    ) -> TransportResponse:
        async with self.session.post(
            url,
            json=payload,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            return await _read_response(response)

    async def get(self, url: str, timeout: float) -> TransportResponse:
        async with self.session.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            return await _read_response(response)


class PredictorClient:
    """Client for making single-step predictions against the remote predictor."""

    def __init__(
        self,
        settings: PredictorSettings,
        transport: PredictorTransport,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self.transport = transport
        self.sleep = sleep
        self.max_attempts = settings.PREDICTOR_MAX_ATTEMPTS
        self.backoff_base_ms = settings.PREDICTOR_BACKOFF_BASE_MS

    async def call_once(self, request: PredictionRequest) -> PredictionResponse:
        """Send one prediction request and parse the next coordinate."""
        # Rebuilt on every call so a retry never reuses a consumed body
        payload = request.to_payload(self.settings.PREDICTOR_SEQUENCE_FIELD)

        try:
            response = await self.transport.post_json(
                self.settings.predict_url,
                payload,
                timeout=self.settings.PREDICTOR_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            raise PredictorTransportError("Predictor request timed out") from e
        except aiohttp.ClientError as e:
            raise PredictorTransportError(f"Predictor request failed: {e}") from e

        if not response.ok:
            logger.warning(
                "Predictor returned non-success status",
                status_code=response.status,
                body=response.body,
            )
            raise PredictorTransportError(
                f"Predictor returned status {response.status}",
                status_code=response.status,
            )

        return self._parse_prediction_response(response.body)

    async def call_with_retry(self, request: PredictionRequest) -> PredictionResponse:
        """Call the predictor, retrying transport failures with exponential backoff."""
        last_error: PredictorTransportError | None = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                delay_ms = self.backoff_base_ms * 2 ** (attempt - 2)
                logger.warning(
                    f"Retrying predictor call in {delay_ms} ms",
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(last_error),
                )
                await self.sleep(delay_ms / 1000)

            logger.debug("Calling predictor", attempt=attempt)
            try:
                return await self.call_once(request)
            except PredictorTransportError as e:
                last_error = e

        logger.error(
            "Predictor unavailable, giving up",
            attempts=self.max_attempts,
            error=str(last_error),
        )
        raise PredictorUnavailable(self.max_attempts, last_error) from last_error

    async def check_health(self) -> bool:
        """Return whether the predictor's health endpoint answers 2xx."""
        try:
            response = await self.transport.get(
                self.settings.health_url,
                timeout=self.settings.PREDICTOR_TIMEOUT_SECONDS,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Predictor health check failed: {e}")
            return False
        return response.ok

    def _parse_prediction_response(self, body: str) -> PredictionResponse:
        """Parse predictor response body into PredictionResponse."""
        try:
            data = json.loads(body)
            return PredictionResponse.from_payload(
                data,
                latitude_field=self.settings.PREDICTOR_LATITUDE_FIELD,
                longitude_field=self.settings.PREDICTOR_LONGITUDE_FIELD,
            )
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
            logger.error(
                "Failed to deserialize predictor response",
                raw_body=body,
                error=str(e),
            )
            raise PredictorProtocolError(
                "Predictor returned an invalid prediction", raw_body=body
            ) from e
