class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when the requested entity does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials or bearer tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a company acts on data it does not own."""


class UpstreamUnavailableError(DomainError):
    """Raised when a call to the backend API fails or returns garbage."""


class EmployeeLimitError(ValidationError):
    """Raised when a company already has as many employees as its plan allows."""
