"""Centralized error transformation for API routes.

Maps gateway errors (domain and infrastructure) to HTTP responses.
"""

from typing import Any

from fastapi import HTTPException

from ogw.domain.shared.error import (
    AuthorizationError,
    ConflictError,
    DomainError,
    GatewayError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    ProtocolError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 422,
    InvalidStateError: 409,
    ConflictError: 409,
    AuthorizationError: 403,
}


def map_gateway_error(error: GatewayError) -> HTTPException:
    """Map a gateway error to an HTTPException.

    ProtocolError becomes an error view carrying the OAuth error pair,
    ValidationError a re-prompt carrying the offending field.
    """
    if isinstance(error, ProtocolError):
        return HTTPException(
            status_code=error.status,
            detail={"error": error.error, "error_description": error.message},
        )

    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InfrastructureError):
        # Infrastructure errors → 503 Service Unavailable
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        status_code = next(
            (status for cls, status in DOMAIN_ERROR_STATUS_MAP.items() if isinstance(error, cls)),
            400,
        )
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        return HTTPException(status_code=status_code, detail=detail)

    # Fallback for unknown GatewayError subclasses
    return HTTPException(status_code=500, detail=detail)
