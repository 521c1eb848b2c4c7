"""Request/response schemas for auth and user endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.authorization import Role


class LoginRequest(BaseModel):
    """Credentials for login. Lengths are not checked so every failure looks the same."""

    username: str = Field(..., description="Username")
    password: str = Field(..., description="Password")


class RegisterRequest(BaseModel):
    """Self-registration payload; formats are validated by the identity service."""

    username: str = Field(..., description="Username (3-50 characters)")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password (8-128 characters)")


class CurrentUser(BaseModel):
    """Verified caller (id, username, role) passed explicitly into gated services."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str
    role: Role


class UserView(BaseModel):
    """Identity as seen outside the identity service (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResponse(BaseModel):
    """JWT access token returned after successful login or registration."""

    token: str = Field(..., description="JWT access token")
    type: str = Field(default="Bearer", description="Token type")
    user: UserView


class CountResponse(BaseModel):
    count: int
