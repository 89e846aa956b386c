class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when an employee lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced goal or employee does not exist."""
