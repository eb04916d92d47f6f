"""Mapping of studio errors onto HTTP responses."""

from fastapi import HTTPException, status

from ..errors import (
    AttachmentError,
    ConfigurationError,
    LaneBusyError,
    NotFoundError,
    OperationTimeoutError,
    QuotaExceededError,
    StudioError,
)

STATUS_CODES: dict[type[StudioError], int] = {
    ConfigurationError: status.HTTP_503_SERVICE_UNAVAILABLE,
    QuotaExceededError: status.HTTP_429_TOO_MANY_REQUESTS,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    OperationTimeoutError: status.HTTP_504_GATEWAY_TIMEOUT,
    AttachmentError: status.HTTP_400_BAD_REQUEST,
    LaneBusyError: status.HTTP_409_CONFLICT,
}


def to_http_exception(error: StudioError) -> HTTPException:
    """Translate a studio error; unmapped errors become 502."""
    for error_type, code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=code, detail=error.user_message)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error.user_message)
