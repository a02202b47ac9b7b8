"""Error hierarchy for the gateway.

Error layers:
- GatewayError: Base class for all gateway errors
- DomainError: Business rule violations, validation failures (4xx responses)
- InfrastructureError: System-level failures like storage/network issues (503 responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
"""


class GatewayError(Exception):
    """Base class for all gateway errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(GatewayError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed. Surfaced to the user as a re-prompt."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictError(DomainError):
    """Resource already exists or version conflict."""


class AlreadyExistsError(ConflictError):
    """A record with the same identifier already exists."""


class AuthorizationError(DomainError):
    """User not authorized for this operation."""


class ProtocolError(DomainError):
    """Raised by the OIDC protocol layer (invalid or expired interaction, unknown client).

    Rendered as a user-facing error page carrying ``status`` and the OAuth
    ``error`` / ``error_description`` pair.
    """

    def __init__(self, message: str, status: int = 400, error: str = "invalid_request") -> None:
        super().__init__(message, code=error)
        self.status = status
        self.error = error


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(GatewayError):
    """Base class for infrastructure/system errors."""


class BackendError(InfrastructureError):
    """Storage backend is unavailable or returned something we cannot decode."""


class ExternalServiceError(InfrastructureError):
    """External service (identity provider, mailer) is unavailable or failed."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
