"""SQLAlchemy ORM models."""

from catalog.models.base import Base
from catalog.models.entry import Entry
from catalog.models.user import User

__all__ = ["Base", "Entry", "User"]
