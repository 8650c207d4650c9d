"""Translate service exceptions into HTTP errors at the route boundary."""

from fastapi import HTTPException, status

from app.services.errors import InvalidValueError, NotFoundError, ServiceError


def to_http_error(error: ServiceError) -> HTTPException:
    """Map a service failure to 404 (missing row) or 400 (rejected field)."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, InvalidValueError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": error.message, "field": error.field},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
