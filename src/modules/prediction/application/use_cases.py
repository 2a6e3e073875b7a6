from collections import deque
from collections.abc import Sequence

from src.modules.prediction.errors import InvalidArgument
from src.modules.prediction.infrastructure.predictor_client import PredictorClient
from src.modules.prediction.models import (
    Coordinate,
    PredictionRequest,
    PredictionResult,
)
from src.utils.logger import get_logger
from src.utils.settings.predictor import PredictorSettings

logger = get_logger(__name__)


class SlidingWindowForecaster:
    """Forecast future coordinates by feeding each prediction back as input.

    Every step sends the most recent ``window_size`` coordinates to the
    predictor, appends the returned point to the output and slides the window
    forward by one. Steps run strictly in sequence because each one depends on
    the previous prediction.
    """

    def __init__(
        self,
        predictor_client: PredictorClient,
        window_size: int = 4,
        input_length: int | None = None,
    ):
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self.predictor_client = predictor_client
        self.window_size = window_size
        self.input_length = max(input_length or window_size, window_size)

    @classmethod
    def from_settings(
        cls, predictor_client: PredictorClient, settings: PredictorSettings
    ) -> "SlidingWindowForecaster":
        return cls(
            predictor_client,
            window_size=settings.FORECAST_WINDOW_SIZE,
            input_length=settings.PREDICTOR_INPUT_LENGTH,
        )

    def validate(self, seed: Sequence[Coordinate], iterations: int) -> None:
        """Raise InvalidArgument if the forecast cannot be started."""
        if seed is None or len(seed) < self.window_size:
            raise InvalidArgument(
                f"Seed sequence must contain at least {self.window_size} coordinates"
            )
        if iterations < 1:
            raise InvalidArgument("Iterations must be greater than 0")

    async def predict(
        self, seed: Sequence[Coordinate], iterations: int
    ) -> PredictionResult:
        """
        Predict ``iterations`` future coordinates following ``seed``.

        Args:
            seed: Known coordinates in chronological order; only the last
                ``window_size`` are used
            iterations: Number of coordinates to predict

        Returns:
            PredictionResult with the predictions in chronological order

        Raises:
            InvalidArgument: seed too short or iterations below 1
            PredictorUnavailable: predictor unreachable after all retries
            PredictorProtocolError: predictor answered with an invalid body
        """
        self.validate(seed, iterations)

        window: deque[Coordinate] = deque(
            seed[-self.window_size :], maxlen=self.window_size
        )
        predicted: list[Coordinate] = []

        logger.info(
            "Starting coordinate forecast",
            iterations=iterations,
            window_size=self.window_size,
            input_length=self.input_length,
        )

        for iteration in range(1, iterations + 1):
            request = PredictionRequest.from_window(window, self.input_length)
            try:
                response = await self.predictor_client.call_with_retry(request)
            except Exception as e:
                logger.error(
                    f"Forecast aborted at iteration {iteration}/{iterations}",
                    iteration=iteration,
                    iterations=iterations,
                    error_type=type(e).__name__,
                )
                raise

            coordinate = response.to_coordinate()
            predicted.append(coordinate)
            # maxlen evicts the oldest entry
            window.append(coordinate)

            logger.info(
                f"Prediction {iteration}/{iterations}",
                latitude=round(coordinate.latitude, 6),
                longitude=round(coordinate.longitude, 6),
            )

        logger.info("Forecast completed", total=len(predicted))

        return PredictionResult(
            predicted_coordinates=tuple(predicted),
            iterations_count=iterations,
        )
