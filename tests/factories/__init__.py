"""Test factories for forecast API models."""

from .coordinates import CoordinateFactory, PredictorReplyFactory

__all__ = [
    "CoordinateFactory",
    "PredictorReplyFactory",
]
