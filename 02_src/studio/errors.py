"""Typed errors raised by the studio core.

Providers convert SDK exceptions into these at the network boundary, so
callers never need to know which SDK produced a failure.
"""


class StudioError(Exception):
    """Base class for all studio errors."""

    retryable = False
    user_message = "Sorry, something went wrong while processing your request."

    def __init__(self, message: str, *, user_message: str | None = None):
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message


class ConfigurationError(StudioError):
    """Missing credential or endpoint. Fatal."""

    user_message = "The service is not configured. Set an API key and try again."


class QuotaExceededError(StudioError):
    """Rate or usage limit hit on the remote service."""

    retryable = True
    user_message = "The usage quota was exceeded. Please wait a moment and retry."


class TransportError(StudioError):
    """Network or stream failure while talking to the remote service."""


class NotFoundError(StudioError):
    """Model or feature unavailable for the current credential."""

    user_message = (
        "This model is not available for your API key. "
        "Use a key from a billing-enabled project."
    )


class OperationTimeoutError(StudioError):
    """A long-running operation did not finish within its poll budget."""

    user_message = "The generation took too long and was abandoned."


class AttachmentError(StudioError):
    """An uploaded file could not be read."""

    user_message = "The file could not be read. Make sure it is not corrupted."


class LaneBusyError(StudioError):
    """A lane already has an exchange in flight."""

    user_message = "Please wait for the current reply to finish."


def looks_like_quota(status: str | None, code: int | None, message: str) -> bool:
    """Heuristic used by providers whose errors only carry loose metadata."""
    lowered = message.lower()
    return (
        status == "RESOURCE_EXHAUSTED"
        or code == 429
        or "429" in message
        or "quota" in lowered
    )


def looks_like_not_found(status: str | None, code: int | None, message: str) -> bool:
    lowered = message.lower()
    return (
        status == "NOT_FOUND"
        or code == 404
        or "404" in message
        or "not found" in lowered
    )
