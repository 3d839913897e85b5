"""Results returned by the credential use cases.

Neither result carries the password hash.
"""

from dataclasses import dataclass

from domain.model.user import User


@dataclass(frozen=True)
class RegistrationResult:
    user_id: str
    email: str
    name: str
    api_key: str

    @classmethod
    def from_user(cls, user: User) -> 'RegistrationResult':
        return cls(user_id=user.id, email=user.email, name=user.name, api_key=user.api_key)


@dataclass(frozen=True)
class AuthenticationResult:
    user_id: str
    email: str
    name: str
    api_key: str
    is_active: bool

    @classmethod
    def from_user(cls, user: User) -> 'AuthenticationResult':
        return cls(
            user_id=user.id,
            email=user.email,
            name=user.name,
            api_key=user.api_key,
            is_active=user.is_active,
        )
