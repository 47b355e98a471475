class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InsufficientBalanceError(DomainError):
    """Raised when requested leave days exceed the available balance."""

    def __init__(self, message: str, *, available: float, requested: float):
        super().__init__(message)
        self.available = available
        self.requested = requested


class InvalidStateError(DomainError):
    """Raised when an operation targets a request in the wrong status."""

    http_status = 409


class ForbiddenError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class NotFoundError(DomainError):
    """Raised when a referenced employee/request/record does not exist."""

    http_status = 404


class DuplicateRecordError(DomainError):
    """Raised when a salary record already exists for the pay period."""

    http_status = 409
