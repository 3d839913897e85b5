"""Port definition for PasswordHasher."""

from typing import Protocol


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, digest: str) -> bool: ...
