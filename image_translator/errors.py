"""Failure types surfaced to the user as a single message."""

from __future__ import annotations


class ImageTranslatorError(Exception):
    """Base class for all failures; ``message`` is shown to the user verbatim."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ImageTranslatorError):
    """Required configuration (e.g. the API key) is missing or invalid."""


class ValidationFailure(ImageTranslatorError):
    """A run or a state change was requested with invalid input."""


class ReadFailure(ImageTranslatorError):
    """The uploaded image could not be read or encoded."""


class InferenceFailure(ImageTranslatorError):
    """A call to the inference endpoint did not yield usable text."""


class ApiFailure(InferenceFailure):
    """Non-success transport response, or the request never completed."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(f"API Error: {detail}")
        self.detail = detail
        self.status_code = status_code


class EmptyResponseFailure(InferenceFailure):
    """Success response whose envelope carries no generated text."""

    def __init__(self) -> None:
        super().__init__("invalid or empty API response")


class UnexpectedFailure(ImageTranslatorError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"an error occurred: {detail}")
        self.detail = detail


__all__ = [
    "ImageTranslatorError",
    "ConfigurationError",
    "ValidationFailure",
    "ReadFailure",
    "InferenceFailure",
    "ApiFailure",
    "EmptyResponseFailure",
    "UnexpectedFailure",
]
