"""Errors raised while forecasting coordinates."""


class ForecastError(Exception):
    """Base class for forecasting failures."""


class InvalidArgument(ForecastError):
    """Caller supplied a seed or iteration count the forecaster cannot use."""


class PredictorTransportError(ForecastError):
    """A single predictor call failed before a usable response arrived.

    Covers refused connections, timeouts and non-2xx statuses. These are the
    only failures the client retries.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class PredictorUnavailable(ForecastError):
    """The predictor kept failing at the transport level on every attempt."""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Predictor unavailable after {attempts} attempts: {last_error}"
        )


class PredictorProtocolError(ForecastError):
    """The predictor answered 2xx with a body that is not a valid prediction."""

    def __init__(self, message: str, raw_body: str):
        self.raw_body = raw_body
        super().__init__(message)
