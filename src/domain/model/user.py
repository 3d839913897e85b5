import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

API_KEY_PREFIX = 'crawlly_'


def generate_api_key() -> str:
    """Issue a new opaque API key for non-interactive callers."""
    return API_KEY_PREFIX + str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """Domain model representing a registered user.

    password_hash and api_key are excluded from repr so they never end up
    in logs or tracebacks.
    """
    id: str
    email: str
    name: str
    password_hash: str = field(repr=False)
    api_key: str = field(repr=False)
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, email: str, name: str, password_hash: str) -> 'User':
        """Build a new active user with a fresh id, API key and timestamps."""
        now = _now()
        return cls(
            id=str(uuid.uuid4()),
            email=email,
            name=name,
            password_hash=password_hash,
            api_key=generate_api_key(),
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    # ── mutations ────────────────────────────────────────────

    def update_email(self, email: str) -> None:
        self.email = email
        self.updated_at = _now()

    def update_name(self, name: str) -> None:
        self.name = name
        self.updated_at = _now()

    def set_password_hash(self, password_hash: str) -> None:
        self.password_hash = password_hash
        self.updated_at = _now()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = _now()

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = _now()

    def regenerate_api_key(self) -> None:
        """Replace the API key; the previous value no longer resolves."""
        self.api_key = generate_api_key()
        self.updated_at = _now()


@dataclass
class UserPage:
    """Paginated list of users with total count."""
    items: list[User]
    total: int
