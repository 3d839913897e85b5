from typing import Protocol

from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Lookups return None when nothing matches. Store failures raise
    PersistenceError; unique-key conflicts on email or api_key raise
    DuplicateError.
    """
    def create(self, user: User) -> None:
        """Persist a new user."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_api_key(self, api_key: str) -> User | None:
        """Find a user by API key. Return User or None if not found."""
        ...

    def update(self, user: User) -> None:
        """Save changes to an existing user. Raise NotFoundError if the id is unknown."""
        ...

    def delete(self, user_id: str) -> None:
        """Remove a user. Raise NotFoundError if the id is unknown."""
        ...

    def list_page(self, offset: int = 0, limit: int = 20) -> list[User]:
        """Return users ordered by created_at descending."""
        ...

    def count(self) -> int:
        """Return the total number of users."""
        ...
