"""
Custom exceptions for the application.
"""
from typing import Optional


class ChalkboardException(Exception):
    """Base exception for all Chalkboard application exceptions."""
    pass


class ValidationError(ChalkboardException):
    """Raised when a request is missing or carries invalid fields."""
    pass


class BlankCanvasError(ValidationError):
    """Raised when a submitted canvas image is too small to contain any work."""
    pass


class NotFoundError(ChalkboardException):
    """Raised when a requested resource is not found."""
    pass


class AuthenticationError(ChalkboardException):
    """Raised when authentication fails."""
    pass


class ConfigurationError(ChalkboardException):
    """Raised when a required setting (API key, secret, relay) is missing."""
    pass


class NoTextDetectedError(ChalkboardException):
    """Raised when OCR produced no text for an otherwise valid image."""
    pass


class PersistenceError(ChalkboardException):
    """Raised when the database rejects an operation. Carries the store's message verbatim."""
    pass


class UpstreamError(ChalkboardException):
    """Base class for failures of the generative model service."""
    pass


class UpstreamTimeoutError(UpstreamError):
    """A single model call did not settle before its deadline."""
    pass


class RateLimitError(UpstreamError):
    """The model service rejected the call for rate limit or quota reasons."""
    pass


class ContentBlockedError(UpstreamError):
    """The model service blocked the prompt or response with its safety filters."""
    pass


class EmptyResponseError(UpstreamError):
    """The model service answered but no text could be extracted."""
    pass


class ResponseParseError(UpstreamError):
    """The model text could not be turned into the structure a call site requires."""
    pass


class RetryExhaustedError(UpstreamError):
    """
    Raised once every attempt of a remote call has failed.

    Attributes:
        operation: Human readable name of the call (e.g. "generate hint")
        attempts: Number of attempts made
        kind: Class of the last failure: "rate_limit", "timeout" or "other"
        last_error: The last underlying exception
    """

    def __init__(self, operation: str, attempts: int, kind: str, last_error: Optional[BaseException]):
        self.operation = operation
        self.attempts = attempts
        self.kind = kind
        self.last_error = last_error
        cause = str(last_error) if last_error else "Unknown error"
        super().__init__(f"Unable to {operation} after {attempts} attempts. Last error: {cause}")
