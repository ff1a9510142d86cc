class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced worker, venue or record does not exist."""


class PositionError(DomainError):
    """The device position could not be obtained (unavailable, timeout, ...)."""


class PositionPermissionDenied(PositionError):
    """The user denied access to the device position."""


class PhotoValidationError(DomainError):
    """Transport or parsing failure while calling the AI photo validator."""


class PersistenceError(DomainError):
    """A write to the persistent store was not acknowledged."""
