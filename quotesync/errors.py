"""Typed failures raised by the transcription and summary services."""

from enum import Enum
from typing import Optional

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    BadRequestError,
    OpenAIError,
    RateLimitError,
)


class ErrorKind(str, Enum):
    """Closed set of failure kinds the services can report."""
    BACKEND_UNAVAILABLE = "backend_unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_INPUT = "invalid_input"
    # Per-quote signal only: unresolved quotes are dropped, never raised
    ALIGNMENT_UNRESOLVED = "alignment_unresolved"


class QuoteSyncError(RuntimeError):
    """Base class for every error surfaced by quotesync."""
    kind: ErrorKind = ErrorKind.BACKEND_UNAVAILABLE

    @property
    def retryable(self) -> bool:
        """True when retrying the same call later may succeed."""
        if self.kind is not ErrorKind.BACKEND_UNAVAILABLE:
            return False
        # Auth, permission and not-found errors will fail the same way next time
        if isinstance(self.__cause__, OpenAIError):
            return is_retryable_api_error(self.__cause__)
        return True


class BackendUnavailable(QuoteSyncError):
    """Network or transport failure talking to a backend. Retry later."""
    kind = ErrorKind.BACKEND_UNAVAILABLE


class MalformedResponse(QuoteSyncError):
    """A backend answered, but with a payload we cannot use."""
    kind = ErrorKind.MALFORMED_RESPONSE


class InvalidInput(QuoteSyncError):
    """The caller's input is unusable (empty, unsupported, ...)."""
    kind = ErrorKind.INVALID_INPUT


_ERROR_CLASSES = {
    ErrorKind.BACKEND_UNAVAILABLE: BackendUnavailable,
    ErrorKind.MALFORMED_RESPONSE: MalformedResponse,
    ErrorKind.INVALID_INPUT: InvalidInput,
}


def is_retryable_api_error(error: Exception) -> bool:
    """Whether an OpenAI SDK error is worth another attempt."""
    if isinstance(error, (RateLimitError, APIConnectionError)):
        return True
    if isinstance(error, APIError):
        error_msg = str(error)
        # HTML bodies come back from 502/503 gateways
        is_html_error = "<!DOCTYPE html>" in error_msg or "<html" in error_msg.lower()
        status_code = getattr(error, 'status_code', None)
        is_5xx_error = bool(status_code) and 500 <= status_code < 600
        return is_html_error or is_5xx_error
    return False


def classify_api_error(error: Exception) -> ErrorKind:
    """Map an OpenAI SDK exception onto an ErrorKind."""
    if isinstance(error, BadRequestError):
        return ErrorKind.INVALID_INPUT
    if isinstance(error, (RateLimitError, APIConnectionError)):
        return ErrorKind.BACKEND_UNAVAILABLE
    if isinstance(error, APIStatusError):
        # 413/415/422: the backend refused the audio itself
        if error.status_code in (413, 415, 422):
            return ErrorKind.INVALID_INPUT
        return ErrorKind.BACKEND_UNAVAILABLE
    return ErrorKind.BACKEND_UNAVAILABLE


def error_from_api(error: Exception, description: Optional[str] = None) -> QuoteSyncError:
    """
    Wrap an OpenAI SDK exception in the matching QuoteSyncError.

    Args:
        error: Exception raised by the OpenAI client
        description: What was being attempted, used as message prefix

    Returns:
        QuoteSyncError subclass instance (not raised)
    """
    kind = classify_api_error(error)
    error_msg = str(error)

    if "<!DOCTYPE html>" in error_msg or "<html" in error_msg.lower():
        error_msg = (
            "OpenAI API server error (502 Bad Gateway). "
            "This is a temporary issue on OpenAI's servers. Please try again in a few minutes."
        )
    elif "quota" in error_msg.lower() or "billing" in error_msg.lower():
        error_msg = f"OpenAI API quota/billing error: {error_msg}. Please check your OpenAI account."

    if description:
        error_msg = f"{description} failed: {error_msg}"

    error_class = _ERROR_CLASSES.get(kind, BackendUnavailable)
    return error_class(error_msg)
