import asyncio

from fastapi import APIRouter, Body, Query, Request, status

from src.api.core.cancellation import ClientDisconnected, run_until_disconnected
from src.api.core.constants import (
    DEFAULT_ITERATIONS,
    DEFAULT_SEED,
    REFERENCE_COORDINATES,
)
from src.api.core.dependencies import ForecasterDep, PredictorSettingsDep
from src.api.core.exceptions.base import ForecastAPIException
from src.api.core.messages import MessageCode
from src.modules.prediction.application.use_cases import SlidingWindowForecaster
from src.modules.prediction.errors import (
    InvalidArgument,
    PredictorProtocolError,
    PredictorUnavailable,
)
from src.modules.prediction.models import Coordinate, PredictionResult
from src.utils.logger import get_logger
from src.utils.settings.predictor import PredictorSettings

logger = get_logger(__name__)

router = APIRouter(prefix="/coordinates", tags=["coordinates"])

# Status code nginx uses for a client that closed the connection early
CLIENT_CLOSED_REQUEST = 499


@router.get("", response_model=list[Coordinate])
async def get_coordinates() -> list[Coordinate]:
    """Return the static list of reference coordinates."""
    logger.info("Returning reference coordinates", count=len(REFERENCE_COORDINATES))
    return list(REFERENCE_COORDINATES)


@router.get("/predict", response_model=PredictionResult)
async def predict_from_default_seed(
    request: Request,
    forecaster: ForecasterDep,
    settings: PredictorSettingsDep,
    iterations: int = Query(default=DEFAULT_ITERATIONS),
) -> PredictionResult:
    """Forecast coordinates that follow the built-in seed sequence."""
    return await _run_forecast(
        request, forecaster, settings, list(DEFAULT_SEED), iterations
    )


@router.post("/predict", response_model=PredictionResult)
async def predict_from_seed(
    request: Request,
    forecaster: ForecasterDep,
    settings: PredictorSettingsDep,
    iterations: int = Query(default=DEFAULT_ITERATIONS),
    seed: list[Coordinate] | None = Body(default=None),
) -> PredictionResult:
    """Forecast coordinates that follow a caller-supplied seed sequence."""
    if not seed:
        raise ForecastAPIException(
            MessageCode.INVALID_INPUT,
            status.HTTP_400_BAD_REQUEST,
            message="A non-empty seed sequence of coordinates is required",
        )
    return await _run_forecast(request, forecaster, settings, seed, iterations)


async def _run_forecast(
    request: Request,
    forecaster: SlidingWindowForecaster,
    settings: PredictorSettings,
    seed: list[Coordinate],
    iterations: int,
) -> PredictionResult:
    """Validate, run the forecaster and map its failures to HTTP errors."""
    logger.info(
        "Forecast requested",
        seed_length=len(seed),
        iterations=iterations,
    )

    try:
        forecaster.validate(seed, iterations)
        return await run_until_disconnected(
            request,
            forecaster.predict(seed, iterations),
            timeout=settings.FORECAST_REQUEST_TIMEOUT_SECONDS,
            poll_interval=settings.FORECAST_DISCONNECT_POLL_SECONDS,
        )
    except InvalidArgument as e:
        raise ForecastAPIException(
            MessageCode.INVALID_INPUT,
            status.HTTP_400_BAD_REQUEST,
            message=str(e),
        )
    except PredictorUnavailable as e:
        logger.error(
            "Prediction service unavailable",
            attempts=e.attempts,
            error=str(e.last_error),
        )
        raise ForecastAPIException(
            MessageCode.EXTERNAL_SERVICE_ERROR,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            details={"description": "Prediction service temporarily unavailable"},
        )
    except PredictorProtocolError as e:
        logger.error("Prediction service returned an invalid response", error=str(e))
        raise ForecastAPIException(
            MessageCode.PREDICTION_FAILED,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"description": "Prediction failed due to an internal error"},
        )
    except asyncio.TimeoutError:
        logger.error(
            "Forecast exceeded request deadline",
            timeout_seconds=settings.FORECAST_REQUEST_TIMEOUT_SECONDS,
        )
        raise ForecastAPIException(
            MessageCode.PREDICTION_TIMEOUT,
            status.HTTP_504_GATEWAY_TIMEOUT,
        )
    except ClientDisconnected:
        raise ForecastAPIException(
            MessageCode.CLIENT_CLOSED_REQUEST,
            CLIENT_CLOSED_REQUEST,
        )
