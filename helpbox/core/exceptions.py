"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries. Each carries the HTTP status the
API layer answers with.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""

    status_code = 400


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""

    status_code = 400


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConflictException(ApplicationException):
    """Exception when a write would break a uniqueness or reference rule."""

    status_code = 409


class AuthenticationException(ApplicationException):
    """Exception when the caller has no valid session or bad credentials."""

    status_code = 401


class PermissionDeniedException(ApplicationException):
    """Exception when the caller's access level is not enough."""

    status_code = 403


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    status_code = 502

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class LLMException(ExternalServiceException):
    """
    Exception for LLM API failures.

    ``upstream_status`` is the HTTP status reported by the provider, or None
    for network errors and failures without a status.
    """

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        details: Optional[dict] = None
    ):
        self.upstream_status = upstream_status
        super().__init__("LLM Service", message, details)

    @property
    def is_service_unavailable(self) -> bool:
        """True when the provider answered 503 (overloaded)."""
        return self.upstream_status == 503


class EmptyModelOutputException(DomainException):
    """Raised when the model answered with nothing usable."""

    def __init__(self, details: Optional[dict] = None):
        super().__init__("Model returned an empty response", details)
