class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or invalid."""


class ConflictError(DomainError):
    """Raised when the request collides with an existing record."""


class NotFoundError(DomainError):
    """Raised when the target record does not exist."""


class InvalidStateError(DomainError):
    """Raised when a record's current state forbids the operation."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
