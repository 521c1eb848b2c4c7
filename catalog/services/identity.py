"""
Identity service: registration, login and user administration.

Every function takes the request's Session. Administrative functions also take
the verified caller and run the authorization gate before touching the store.
Outward values are UserView; the password hash stays inside this module.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.core.authorization import Operation, Role, authorize
from catalog.core.errors import (
    EMAIL_TAKEN,
    USERNAME_TAKEN,
    AccessDeniedError,
    ConflictError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
)
from catalog.core.security import burn_password_check, hash_password, verify_password
from catalog.models.user import User
from catalog.schemas.auth import CurrentUser, UserView
from catalog.services.validators import validate_registration
from catalog.stores.users import UserStore

logger = logging.getLogger(__name__)


def _view(user: User) -> UserView:
    return UserView.model_validate(user)


def _parse_role(role: Role | str) -> Role:
    try:
        return Role(role.upper() if isinstance(role, str) else role)
    except ValueError:
        raise InvalidInputError(f"Unknown role: {role!r}", field="role") from None


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> UserView:
    """
    Validate, check uniqueness, hash and persist a user with the given role.

    Not gated: this is the bootstrap path (CLI, seeding) and the only way to
    create an ADMIN. Self-registration goes through register().
    """
    username = username.strip() if isinstance(username, str) else username
    email = email.strip() if isinstance(email, str) else email
    validate_registration(username, email, password)
    role = _parse_role(role)

    store = UserStore(db)
    if store.exists_by_username(username):
        raise ConflictError(f"Username already exists: {username}", USERNAME_TAKEN)
    if store.exists_by_email(email):
        raise ConflictError(f"Email already exists: {email}", EMAIL_TAKEN)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=role.value,
    )
    try:
        user = store.save(user)
    except IntegrityError:
        # Lost a race with a concurrent insert; the unique constraint decided.
        if store.find_by_username(username) is not None:
            raise ConflictError(f"Username already exists: {username}", USERNAME_TAKEN) from None
        raise ConflictError(f"Email already exists: {email}", EMAIL_TAKEN) from None

    logger.info("User created: id=%s username=%s role=%s", user.id, user.username, user.role)
    return _view(user)


def register(db: Session, username: str, email: str, password: str) -> UserView:
    """Self-registration. The new identity always gets role USER."""
    return create_user(db, username, email, password, Role.USER)


def authenticate(db: Session, username: str, password: str) -> UserView:
    """
    Return the user whose username and password match.

    Unknown username and wrong password raise the same InvalidCredentialsError,
    and both run one bcrypt verification, so neither the error nor the timing
    tells a caller which usernames exist. The username is trimmed the same
    way create_user trims it.
    """
    user = UserStore(db).find_by_username(username.strip()) if isinstance(username, str) else None
    if user is None:
        burn_password_check(password if isinstance(password, str) else "")
        logger.info("Login failed")
        raise InvalidCredentialsError()
    if not isinstance(password, str) or not verify_password(password, user.password_hash):
        logger.info("Login failed")
        raise InvalidCredentialsError()
    logger.debug("Login succeeded: user_id=%s", user.id)
    return _view(user)


def get_profile(db: Session, principal: CurrentUser | None) -> UserView:
    """The caller's own identity."""
    principal = authorize(principal, Operation.PROFILE_READ)
    user = UserStore(db).find_by_id(principal.id)
    if user is None:
        raise NotFoundError(f"User not found with ID: {principal.id}")
    return _view(user)


def list_users(db: Session, principal: CurrentUser | None) -> list[UserView]:
    authorize(principal, Operation.USER_LIST)
    return [_view(u) for u in UserStore(db).list_all()]


def get_user(db: Session, principal: CurrentUser | None, user_id: int) -> UserView:
    authorize(principal, Operation.USER_READ)
    user = UserStore(db).find_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User not found with ID: {user_id}")
    return _view(user)


def list_by_role(db: Session, principal: CurrentUser | None, role: Role | str) -> list[UserView]:
    authorize(principal, Operation.USER_LIST_BY_ROLE)
    return [_view(u) for u in UserStore(db).list_by_role(_parse_role(role))]


def change_role(
    db: Session,
    principal: CurrentUser | None,
    user_id: int,
    new_role: Role | str,
) -> UserView:
    """Set a user's role. An admin cannot change their own role."""
    principal = authorize(principal, Operation.USER_CHANGE_ROLE)
    new_role = _parse_role(new_role)
    store = UserStore(db)
    user = store.find_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User not found with ID: {user_id}")
    if user.id == principal.id:
        raise AccessDeniedError("Users cannot change their own role")
    user.role = new_role.value
    user = store.save(user)
    logger.info("User role updated: id=%s role=%s by=%s", user.id, user.role, principal.id)
    return _view(user)


def delete_user(db: Session, principal: CurrentUser | None, user_id: int) -> None:
    principal = authorize(principal, Operation.USER_DELETE)
    if not UserStore(db).delete_by_id(user_id):
        raise NotFoundError(f"User not found with ID: {user_id}")
    logger.info("User deleted: id=%s by=%s", user_id, principal.id)


def count_users(db: Session, principal: CurrentUser | None) -> int:
    authorize(principal, Operation.USER_COUNT)
    return UserStore(db).count()


def count_by_role(db: Session, principal: CurrentUser | None, role: Role | str) -> int:
    authorize(principal, Operation.USER_COUNT)
    return UserStore(db).count_by_role(_parse_role(role))
