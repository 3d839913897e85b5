"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DuplicateEmailError(DuplicateError):
    """A user with this email is already registered."""

    def __init__(self, message: str = "User with this email already exists"):
        super().__init__(message)


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Email or password is wrong. Deliberately does not say which."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class AccountDeactivatedError(DomainError):
    """Account exists but has been administratively disabled."""

    def __init__(self, message: str = "Account is deactivated"):
        super().__init__(message)


class HashingError(DomainError):
    """Password hashing failed for a reason other than bad input."""


class InternalError(DomainError):
    """Infrastructure failure surfaced by a use case."""


class PersistenceError(DomainError):
    """User store failure (connectivity, write rejected, ...)."""
