from datetime import datetime

from pydantic import BaseModel, Field

from domain.model.user import User


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    password: str = Field(..., description="Plain text password (min 6 characters)")


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: str = Field(..., description="User email")
    password: str = Field(..., description="Plain text password")


class RegisterResponse(BaseModel):
    user_id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    api_key: str = Field(..., description="API key for crawler requests")
    message: str = Field("User registered successfully")


class LoginResponse(BaseModel):
    user_id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    api_key: str = Field(..., description="API key for crawler requests")
    message: str = Field("Login successful")


class UserResponse(BaseModel):
    """Public user profile. Never includes the password hash or API key."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    is_active: bool = Field(..., description="Whether the account is active")
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_domain(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ApiKeyResponse(BaseModel):
    api_key: str = Field(..., description="Newly issued API key")
    message: str = Field("API key regenerated")
