"""Persistence adapters: the only code that queries the database."""

from catalog.stores.entries import EntryStore
from catalog.stores.users import UserStore

__all__ = ["EntryStore", "UserStore"]
