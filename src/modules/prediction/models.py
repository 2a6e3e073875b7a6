"""Prediction domain models."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Coordinate(BaseModel):
    """A single geographic point, immutable once produced."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    # Reserved for sargassum biomass estimation; never filled by forecasting
    biomass_estimate: float | None = None

    def as_pair(self) -> list[float]:
        return [self.latitude, self.longitude]


class PredictionRequest(BaseModel):
    """Single-step request in the predictor's wire form."""

    model_config = ConfigDict(frozen=True)

    sequence: list[list[float]]

    @classmethod
    def from_window(
        cls, window: Sequence[Coordinate], input_length: int
    ) -> "PredictionRequest":
        """Build a request from the window, padding with its last point.

        When the predictor expects a longer history than the window holds, the
        newest coordinate is repeated until ``input_length`` rows are present.
        """
        sequence = [coordinate.as_pair() for coordinate in window]
        if not sequence:
            raise ValueError("Cannot build a prediction request from an empty window")
        while len(sequence) < input_length:
            sequence.append(list(sequence[-1]))
        return cls(sequence=sequence)

    def to_payload(self, sequence_field: str) -> dict[str, Any]:
        """Serialize under the field name pinned for the target deployment."""
        return {sequence_field: [list(row) for row in self.sequence]}


class PredictionResponse(BaseModel):
    """Next coordinate returned by the predictor."""

    model_config = ConfigDict(frozen=True)

    next_latitude: float = Field(strict=True, allow_inf_nan=False, ge=-90, le=90)
    next_longitude: float = Field(
        strict=True, allow_inf_nan=False, ge=-180, le=180
    )

    @classmethod
    def from_payload(
        cls, data: Any, latitude_field: str, longitude_field: str
    ) -> "PredictionResponse":
        """Parse a decoded response body, matching field names case-insensitively."""
        if not isinstance(data, Mapping):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        lowered = {str(key).lower(): value for key, value in data.items()}
        return cls(
            next_latitude=lowered.get(latitude_field.lower()),
            next_longitude=lowered.get(longitude_field.lower()),
        )

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.next_latitude, longitude=self.next_longitude)


class PredictionResult(BaseModel):
    """Accumulated output of one forecasting run."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    predicted_coordinates: tuple[Coordinate, ...]
    iterations_count: int

