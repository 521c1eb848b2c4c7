"""User endpoints: own profile for everyone, administration for admins."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from catalog.api.v1.auth import require
from catalog.core.authorization import Operation, Role
from catalog.core.database import get_db
from catalog.schemas.auth import CountResponse, CurrentUser, UserView
from catalog.services import identity

router = APIRouter()


@router.get("/profile", response_model=UserView)
def get_profile(
    principal: Annotated[CurrentUser, Depends(require(Operation.PROFILE_READ))],
    db: Annotated[Session, Depends(get_db)],
) -> UserView:
    """The authenticated caller's own account."""
    return identity.get_profile(db, principal)


@router.get("", response_model=list[UserView])
def list_users(
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_LIST))],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserView]:
    return identity.list_users(db, principal)


@router.get("/count", response_model=CountResponse)
def count_users(
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_COUNT))],
    db: Annotated[Session, Depends(get_db)],
) -> CountResponse:
    return CountResponse(count=identity.count_users(db, principal))


@router.get("/count/role/{role}", response_model=CountResponse)
def count_by_role(
    role: Role,
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_COUNT))],
    db: Annotated[Session, Depends(get_db)],
) -> CountResponse:
    return CountResponse(count=identity.count_by_role(db, principal, role))


@router.get("/role/{role}", response_model=list[UserView])
def list_by_role(
    role: Role,
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_LIST_BY_ROLE))],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserView]:
    return identity.list_by_role(db, principal, role)


@router.get("/{user_id}", response_model=UserView)
def get_user(
    user_id: int,
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_READ))],
    db: Annotated[Session, Depends(get_db)],
) -> UserView:
    return identity.get_user(db, principal, user_id)


@router.put("/{user_id}/role", response_model=UserView)
def change_role(
    user_id: int,
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_CHANGE_ROLE))],
    db: Annotated[Session, Depends(get_db)],
    role: Annotated[Role, Query(description="New role: USER or ADMIN")],
) -> UserView:
    """Change another user's role (admin only)."""
    return identity.change_role(db, principal, user_id, role)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    principal: Annotated[CurrentUser, Depends(require(Operation.USER_DELETE))],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    identity.delete_user(db, principal, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
