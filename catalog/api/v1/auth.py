"""JWT login/registration and auth dependencies (get_current_user, require)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from catalog.core.authorization import Operation, authorize
from catalog.core.database import get_db
from catalog.core.errors import UnauthenticatedError
from catalog.core.security import TokenError, create_access_token, decode_access_token
from catalog.schemas.auth import AuthResponse, CurrentUser, LoginRequest, RegisterRequest
from catalog.services import identity

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser | None:
    """
    Dependency: the caller asserted by the Bearer JWT, or None without a token.

    A token that is present but malformed, badly signed or expired raises
    UnauthenticatedError (401). The database is not consulted: a role change
    takes effect when the caller's current token expires.
    """
    if credentials is None:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except TokenError as e:
        raise UnauthenticatedError(e.message, code=e.kind.value) from e


def require(operation: Operation) -> Callable[..., CurrentUser]:
    """
    Dependency factory: run the authorization gate for operation.

    Resolved before the request body is validated, so an unauthorized caller
    gets 401/403 whatever it sent.
    """

    def dependency(
        principal: Annotated[CurrentUser | None, Depends(get_current_user)],
    ) -> CurrentUser:
        return authorize(principal, operation)

    dependency.__name__ = f"require_{operation.name.lower()}"
    return dependency


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = identity.authenticate(db, body.username, body.password)
    logger.info("Login successful for user_id=%s", user.id)
    return AuthResponse(token=create_access_token(user), user=user)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create a USER account and log it in."""
    user = identity.register(db, body.username, body.email, body.password)
    logger.info("Registration successful for user_id=%s", user.id)
    return AuthResponse(token=create_access_token(user), user=user)
