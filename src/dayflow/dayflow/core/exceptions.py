class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable symbolic ``kind`` so callers can branch on
    the failure without parsing the message.
    """

    kind = "domain_error"

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"


class NotFoundError(DomainError):
    """Raised when a referenced employee or record does not exist."""

    kind = "not_found"


class ConflictError(DomainError):
    """Raised when a record already occupies a unique key."""

    kind = "conflict"


class StateError(DomainError):
    """Raised when a record is not in the state an operation requires."""

    kind = "invalid_state"
