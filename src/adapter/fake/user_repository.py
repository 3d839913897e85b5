"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace

from domain.model.errors import DuplicateError, NotFoundError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    def _conflicts(self, user: User) -> bool:
        return any(
            u.id != user.id and (u.email == user.email or u.api_key == user.api_key)
            for u in self.store.values()
        )

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> None:
        if user.id in self.store or self._conflicts(user):
            raise DuplicateError("User with this email or API key already exists")
        self.store[user.id] = replace(user)

    def update(self, user: User) -> None:
        if user.id not in self.store:
            raise NotFoundError(f"User {user.id} not found")
        if self._conflicts(user):
            raise DuplicateError("User with this email or API key already exists")
        self.store[user.id] = replace(user)

    def delete(self, user_id: str) -> None:
        if self.store.pop(user_id, None) is None:
            raise NotFoundError(f"User {user_id} not found")

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return replace(user) if user else None

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return replace(user)
        return None

    def get_by_api_key(self, api_key: str) -> User | None:
        for user in self.store.values():
            if user.api_key == api_key:
                return replace(user)
        return None

    def list_page(self, offset: int = 0, limit: int = 20) -> list[User]:
        users = sorted(self.store.values(), key=lambda u: u.created_at, reverse=True)
        return [replace(u) for u in users[offset:offset + limit]]

    def count(self) -> int:
        return len(self.store)
