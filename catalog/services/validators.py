"""
Field and catalog-key validation. Pure functions, no I/O.

The is_* predicates are total: any input (None, non-strings included) gives a
bool. The validate_* helpers raise InvalidInputError naming the first bad field.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from catalog.core.errors import INVALID_KEY, InvalidInputError
from catalog.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)

# Catalog keys: exactly 10 or exactly 13 ASCII digits. No check digit is computed.
_KEY_10 = re.compile(r"[0-9]{10}")
_KEY_13 = re.compile(r"[0-9]{13}")

_EMAIL = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

TITLE_MAX_LEN = 100
AUTHOR_MAX_LEN = 50
GENRE_MAX_LEN = 50
PRICE_MAX_INTEGER_DIGITS = 10
PRICE_MAX_FRACTION_DIGITS = 2


def normalize_key(raw: Any) -> str:
    """Key as stored: surrounding whitespace removed."""
    return raw.strip() if isinstance(raw, str) else ""


def is_valid_key(raw: Any) -> bool:
    """True iff the trimmed input is exactly 10 or exactly 13 ASCII digits."""
    key = normalize_key(raw)
    if len(key) == 10:
        return _KEY_10.fullmatch(key) is not None
    if len(key) == 13:
        return _KEY_13.fullmatch(key) is not None
    return False


def is_length_between(value: Any, min_len: int, max_len: int) -> bool:
    return isinstance(value, str) and min_len <= len(value) <= max_len


def is_valid_username_length(username: Any) -> bool:
    return is_length_between(username, USERNAME_MIN_LEN, USERNAME_MAX_LEN)


def is_valid_password_length(password: Any) -> bool:
    return is_length_between(password, PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)


def is_valid_email(email: Any) -> bool:
    if not is_length_between(email, 3, EMAIL_MAX_LEN):
        return False
    return _EMAIL.fullmatch(email) is not None


def is_valid_price(price: Any) -> bool:
    """Strictly positive, finite, at most 2 fractional and 10 integer digits."""
    if isinstance(price, bool) or not isinstance(price, (Decimal, int, str)):
        return False
    try:
        value = Decimal(price)
    except (InvalidOperation, ValueError):
        return False
    if not value.is_finite() or value <= 0:
        return False
    exponent = value.normalize().as_tuple().exponent
    if -exponent > PRICE_MAX_FRACTION_DIGITS:
        return False
    return value.adjusted() + 1 <= PRICE_MAX_INTEGER_DIGITS


def validate_registration(username: Any, email: Any, password: Any) -> None:
    if not is_valid_username_length(username):
        raise InvalidInputError(
            f"Username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters",
            field="username",
        )
    if not is_valid_email(email):
        raise InvalidInputError("Email should be valid", field="email")
    if not is_valid_password_length(password):
        raise InvalidInputError(
            f"Password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters",
            field="password",
        )


def validate_entry_fields(
    title: Any,
    author: Any,
    publication_date: Any,
    genre: Any,
    price: Any,
) -> None:
    """Check every entry field except the key, which has its own error code."""
    if not isinstance(title, str) or not title.strip() or len(title) > TITLE_MAX_LEN:
        raise InvalidInputError(
            f"Title must be between 1 and {TITLE_MAX_LEN} characters", field="title"
        )
    if not isinstance(author, str) or not author.strip() or len(author) > AUTHOR_MAX_LEN:
        raise InvalidInputError(
            f"Author must be between 1 and {AUTHOR_MAX_LEN} characters", field="author"
        )
    if not isinstance(publication_date, date):
        raise InvalidInputError("Publication date is required", field="publication_date")
    if genre is not None and (not isinstance(genre, str) or len(genre) > GENRE_MAX_LEN):
        raise InvalidInputError(
            f"Genre must not exceed {GENRE_MAX_LEN} characters", field="genre"
        )
    if not is_valid_price(price):
        raise InvalidInputError(
            "Price must be greater than 0 with at most 2 decimal places", field="price"
        )


def validate_key(raw: Any) -> str:
    """Return the normalized key or raise INVALID_KEY."""
    if not is_valid_key(raw):
        raise InvalidInputError(f"Invalid key format: {raw!r}", code=INVALID_KEY, field="key")
    return normalize_key(raw)
