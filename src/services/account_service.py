"""Account service — administrative operations on existing users.

Covers the Active/Deactivated transitions, API key rotation, profile edits,
password reset, deletion and listing.
"""

import logging

from domain.model.errors import (
    AccountDeactivatedError,
    DuplicateEmailError,
    DuplicateError,
    HashingError,
    InternalError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from domain.model.user import User, UserPage
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services.auth_service import validate_email, validate_name, validate_password

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def resolve_api_key(repo: UserRepository, api_key: str | None) -> User:
    """Resolve a bearer API key to its active owner.

    Raises:
        InvalidCredentialsError: key missing or unknown
        AccountDeactivatedError: owner is deactivated
    """
    if not api_key or not api_key.strip():
        raise InvalidCredentialsError("API key required")
    user = repo.get_by_api_key(api_key)
    if user is None:
        raise InvalidCredentialsError("Invalid API key")
    if not user.is_active:
        raise AccountDeactivatedError()
    return user


def _save(repo: UserRepository, user: User) -> User:
    try:
        repo.update(user)
    except DuplicateError as e:
        raise DuplicateEmailError() from e
    return user


def update_profile(
    repo: UserRepository,
    user_id: str,
    email: str | None = None,
    name: str | None = None,
) -> User:
    """Change email and/or name. Fields left as None are untouched."""
    user = get_user(repo, user_id)

    if email is not None and email != user.email:
        validate_email(email)
        other = repo.get_by_email(email)
        if other is not None and other.id != user.id:
            raise DuplicateEmailError()
        user.update_email(email)

    if name is not None and name != user.name:
        validate_name(name)
        user.update_name(name)

    _save(repo, user)
    logger.info("User profile updated", extra={"userId": user.id})
    return user


def deactivate(repo: UserRepository, user_id: str) -> User:
    user = get_user(repo, user_id)
    user.deactivate()
    _save(repo, user)
    logger.info("User deactivated", extra={"userId": user.id})
    return user


def activate(repo: UserRepository, user_id: str) -> User:
    user = get_user(repo, user_id)
    user.activate()
    _save(repo, user)
    logger.info("User activated", extra={"userId": user.id})
    return user


def regenerate_api_key(repo: UserRepository, user_id: str) -> User:
    """Issue a new API key; the previous one stops resolving."""
    user = get_user(repo, user_id)
    user.regenerate_api_key()
    _save(repo, user)
    logger.info("API key regenerated", extra={"userId": user.id})
    return user


def reset_password(
    repo: UserRepository,
    hasher: PasswordHasher,
    user_id: str,
    password: str,
) -> User:
    validate_password(password)
    user = get_user(repo, user_id)
    try:
        user.set_password_hash(hasher.hash(password))
    except HashingError as e:
        raise InternalError("failed to hash password") from e
    _save(repo, user)
    logger.info("Password reset", extra={"userId": user.id})
    return user


def delete_user(repo: UserRepository, user_id: str) -> None:
    repo.delete(user_id)
    logger.info("User deleted", extra={"userId": user_id})


def list_users(repo: UserRepository, offset: int = 0, limit: int = 20) -> UserPage:
    """Page through users, newest first."""
    if offset < 0:
        raise ValidationError("offset must be >= 0")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
    return UserPage(items=repo.list_page(offset=offset, limit=limit), total=repo.count())
