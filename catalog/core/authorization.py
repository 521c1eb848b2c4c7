"""
Role-based authorization gate.

One static table maps every gated operation to the roles allowed to run it.
Services call ``authorize`` first thing, with the caller passed explicitly;
the API layer consults the same table as a route dependency so a request is
rejected before its body is even validated.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from catalog.core.errors import AccessDeniedError, UnauthenticatedError

if TYPE_CHECKING:
    from catalog.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class Operation(str, Enum):
    ENTRY_LIST = "entry:list"
    ENTRY_READ = "entry:read"
    ENTRY_CREATE = "entry:create"
    ENTRY_UPDATE = "entry:update"
    ENTRY_DELETE = "entry:delete"
    PROFILE_READ = "profile:read"
    USER_LIST = "user:list"
    USER_READ = "user:read"
    USER_LIST_BY_ROLE = "user:list_by_role"
    USER_CHANGE_ROLE = "user:change_role"
    USER_DELETE = "user:delete"
    USER_COUNT = "user:count"


_ANY_ROLE = frozenset({Role.USER, Role.ADMIN})
_ADMIN_ONLY = frozenset({Role.ADMIN})

POLICY: dict[Operation, frozenset[Role]] = {
    Operation.ENTRY_LIST: _ANY_ROLE,
    Operation.ENTRY_READ: _ANY_ROLE,
    Operation.PROFILE_READ: _ANY_ROLE,
    Operation.ENTRY_CREATE: _ADMIN_ONLY,
    Operation.ENTRY_UPDATE: _ADMIN_ONLY,
    Operation.ENTRY_DELETE: _ADMIN_ONLY,
    Operation.USER_LIST: _ADMIN_ONLY,
    Operation.USER_READ: _ADMIN_ONLY,
    Operation.USER_LIST_BY_ROLE: _ADMIN_ONLY,
    Operation.USER_CHANGE_ROLE: _ADMIN_ONLY,
    Operation.USER_DELETE: _ADMIN_ONLY,
    Operation.USER_COUNT: _ADMIN_ONLY,
}


def is_allowed(role: Role | str, operation: Operation) -> bool:
    """True if role may perform operation. Unknown roles and operations are denied."""
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in POLICY.get(operation, frozenset())


def authorize(principal: CurrentUser | None, operation: Operation) -> CurrentUser:
    """
    Check the caller against POLICY and return it when allowed.

    Raises UnauthenticatedError when there is no caller and AccessDeniedError
    when the caller's role is not in the operation's role set.
    """
    if principal is None:
        raise UnauthenticatedError()
    if not is_allowed(principal.role, operation):
        logger.warning(
            "Access denied: user_id=%s role=%s operation=%s",
            principal.id,
            principal.role.value,
            operation.value,
        )
        raise AccessDeniedError()
    return principal
