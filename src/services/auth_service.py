"""Auth service — registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

from domain.model.auth import AuthenticationResult, RegistrationResult
from domain.model.errors import (
    AccountDeactivatedError,
    DuplicateEmailError,
    DuplicateError,
    HashingError,
    InternalError,
    InvalidCredentialsError,
    PersistenceError,
    ValidationError,
)
from domain.model.user import User
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def validate_email(email: str) -> None:
    """Minimal syntactic check: non-blank and contains '@'."""
    if not email or not email.strip():
        raise ValidationError("email is required")
    if '@' not in email:
        raise ValidationError("invalid email format")


def validate_name(name: str) -> None:
    if not name or not name.strip():
        raise ValidationError("name is required")


def validate_password(password: str) -> None:
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")


def _find_existing(repo: UserRepository, email: str) -> User | None:
    # A failed lookup counts as "not found"; the store's unique email
    # constraint still rejects the insert if the user does exist.
    try:
        return repo.get_by_email(email)
    except PersistenceError:
        logger.warning("Duplicate-email pre-check failed, relying on store constraint", extra={"email": email})
        return None


def register(
    repo: UserRepository,
    hasher: PasswordHasher,
    email: str,
    name: str,
    password: str,
) -> RegistrationResult:
    """Register a new user.

    Returns user id, email, name and the issued API key.

    Raises:
        ValidationError: blank email/name, email without '@', password too short or too long
        DuplicateEmailError: email already registered (pre-check or store conflict)
        InternalError: password hashing failed
        PersistenceError: store rejected the write
    """
    validate_email(email)
    validate_name(name)
    validate_password(password)

    if _find_existing(repo, email) is not None:
        raise DuplicateEmailError()

    try:
        password_hash = hasher.hash(password)
    except HashingError as e:
        logger.error("Password hashing failed", extra={"email": email, "error": str(e)})
        raise InternalError("failed to hash password") from e

    user = User.create(email=email, name=name, password_hash=password_hash)

    try:
        repo.create(user)
    except DuplicateError as e:
        # Lost a race with a concurrent registration for the same email
        raise DuplicateEmailError() from e

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return RegistrationResult.from_user(user)


def authenticate(
    repo: UserRepository,
    hasher: PasswordHasher,
    email: str,
    password: str,
) -> AuthenticationResult:
    """Authenticate a user by email and password.

    Never changes user state. Unknown email and wrong password raise the
    same error so callers cannot probe which emails are registered.

    Raises:
        InvalidCredentialsError: unknown email or wrong password
        AccountDeactivatedError: account exists but is disabled
        PersistenceError: store lookup failed
    """
    user = repo.get_by_email(email)
    if user is None:
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.info("Login refused for deactivated account", extra={"userId": user.id})
        raise AccountDeactivatedError()

    if not hasher.verify(password, user.password_hash):
        raise InvalidCredentialsError()

    logger.info("User authenticated", extra={"userId": user.id})
    return AuthenticationResult.from_user(user)
