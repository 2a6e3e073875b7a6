from typing import Annotated

from fastapi import Depends, Request

from src.modules.prediction.application.use_cases import SlidingWindowForecaster
from src.modules.prediction.infrastructure.predictor_client import (
    AiohttpPredictorTransport,
    PredictorClient,
)
from src.utils.settings.predictor import PredictorSettings, get_predictor_settings


PredictorSettingsDep = Annotated[PredictorSettings, Depends(get_predictor_settings)]


async def get_predictor_client(
    request: Request, settings: PredictorSettingsDep
) -> PredictorClient:
    """Get predictor client bound to the application's HTTP session."""
    transport = AiohttpPredictorTransport(request.app.state.http_session)
    return PredictorClient(settings, transport)


PredictorClientDep = Annotated[PredictorClient, Depends(get_predictor_client)]


async def get_forecaster(
    predictor_client: PredictorClientDep, settings: PredictorSettingsDep
) -> SlidingWindowForecaster:
    """Get a sliding window forecaster for the current request."""
    return SlidingWindowForecaster.from_settings(predictor_client, settings)


ForecasterDep = Annotated[SlidingWindowForecaster, Depends(get_forecaster)]
