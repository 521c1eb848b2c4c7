"""Pydantic request/response schemas."""

from catalog.schemas.auth import (
    AuthResponse,
    CountResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserView,
)
from catalog.schemas.entries import CatalogEntry, EntryPage
from catalog.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "CatalogEntry",
    "CountResponse",
    "CurrentUser",
    "EntryPage",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserView",
]
