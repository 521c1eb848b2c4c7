"""Core app configuration, database, security and authorization."""

from catalog.core.config import get_settings, settings
from catalog.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
