"""Helpers shared by the API routes."""

from __future__ import annotations

from fastapi import HTTPException, status

from shopfeed.domain.errors import (
    InvalidArgument,
    NotFound,
    NotificationError,
    PermissionDenied,
    TransientStoreFailure,
)

_STATUS_BY_ERROR: tuple[tuple[type[NotificationError], int], ...] = (
    (InvalidArgument, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (TransientStoreFailure, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_exception(exc: NotificationError) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
    )


__all__ = ["to_http_exception"]
