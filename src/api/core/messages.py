"""Centralized message codes and default messages for API responses."""

from enum import Enum


class MessageCode(str, Enum):
    """Centralized message codes for API responses."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # Service Errors
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Prediction errors
    PREDICTION_FAILED = "PREDICTION_FAILED"
    PREDICTION_TIMEOUT = "PREDICTION_TIMEOUT"
    CLIENT_CLOSED_REQUEST = "CLIENT_CLOSED_REQUEST"

    # Generic errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"


# Default messages for each message code
DEFAULT_MESSAGES = {
    # Validation errors
    MessageCode.VALIDATION_ERROR: "Validation failed",
    MessageCode.INVALID_INPUT: "Invalid input provided",
    MessageCode.PAYLOAD_TOO_LARGE: "Request payload too large",
    # Service Errors
    MessageCode.EXTERNAL_SERVICE_ERROR: "Prediction service unavailable",
    # Prediction errors
    MessageCode.PREDICTION_FAILED: "Prediction failed",
    MessageCode.PREDICTION_TIMEOUT: "Prediction did not finish in time",
    MessageCode.CLIENT_CLOSED_REQUEST: "Client closed request",
    # Generic errors
    MessageCode.INTERNAL_ERROR: "Internal server error",
    MessageCode.BAD_REQUEST: "Bad request",
    MessageCode.NOT_FOUND: "Resource not found",
}


def get_default_message(message_code: MessageCode) -> str:
    """Get default message for a message code."""
    return DEFAULT_MESSAGES.get(message_code, "Operation completed")
