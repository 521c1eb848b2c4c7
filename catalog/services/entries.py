"""
Catalog service: listing, lookup and authorized mutation of catalog entries.

Order of checks for mutations: authorization, field validation, existence,
key format (INVALID_KEY), key uniqueness (KEY_TAKEN). A caller without the
required role therefore never has its payload validated or persisted.
"""

import logging
import math
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.core.authorization import Operation, authorize
from catalog.core.config import settings
from catalog.core.errors import KEY_TAKEN, ConflictError, InvalidInputError, NotFoundError
from catalog.models.entry import Entry
from catalog.schemas.auth import CurrentUser
from catalog.schemas.entries import CatalogEntry, EntryPage
from catalog.services.validators import normalize_key, validate_entry_fields, validate_key
from catalog.stores.entries import EntryStore

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "title"

# Largest row offset a page may start at; fits a signed 32-bit OFFSET.
MAX_OFFSET = 2**31 - 1

# Accepted sort names (lower-cased) -> entry attribute.
SORT_FIELD_ALIASES = {
    "id": "id",
    "title": "title",
    "author": "author",
    "publicationdate": "publication_date",
    "publication_date": "publication_date",
    "genre": "genre",
    "price": "price",
    "key": "key",
}


def resolve_sort_field(raw: Any) -> str:
    """Allow-listed attribute for raw; anything unknown falls back to title."""
    if isinstance(raw, str):
        field = SORT_FIELD_ALIASES.get(raw.lower())
        if field is not None:
            return field
    logger.warning("Invalid sort field requested: %r, defaulting to %r", raw, DEFAULT_SORT_FIELD)
    return DEFAULT_SORT_FIELD


def resolve_sort_direction(raw: Any) -> str:
    """'desc' (any case) sorts descending; every other value ascending."""
    return "desc" if isinstance(raw, str) and raw.lower() == "desc" else "asc"


def _to_value(entry: Entry) -> CatalogEntry:
    return CatalogEntry.model_validate(entry)


def _key_taken(key: str) -> ConflictError:
    return ConflictError(f"Entry with key {key} already exists", KEY_TAKEN)


def list_entries(
    db: Session,
    principal: CurrentUser | None,
    page: int = 0,
    size: int | None = None,
    sort_field: Any = DEFAULT_SORT_FIELD,
    sort_direction: Any = "asc",
) -> EntryPage:
    """
    One page of entries. page is zero-based; size is capped at MAX_PAGE_SIZE.
    Unknown sort fields are not an error: they sort by title.
    """
    authorize(principal, Operation.ENTRY_LIST)
    if size is None:
        size = settings.DEFAULT_PAGE_SIZE
    if page < 0:
        raise InvalidInputError("Page index must not be less than zero", field="page")
    if size < 1:
        raise InvalidInputError("Page size must not be less than one", field="size")
    size = min(size, settings.MAX_PAGE_SIZE)
    if page * size > MAX_OFFSET:
        raise InvalidInputError(f"Page index too large: {page}", field="page")

    field = resolve_sort_field(sort_field)
    direction = resolve_sort_direction(sort_direction)
    logger.debug("Listing entries: page=%s size=%s sort=%s %s", page, size, field, direction)

    store = EntryStore(db)
    total = store.count()
    rows = store.find_page(page * size, size, field, direction)
    return EntryPage(
        items=[_to_value(r) for r in rows],
        page=page,
        size=size,
        total_items=total,
        total_pages=math.ceil(total / size) if total else 0,
        sort_field=field,
        sort_direction=direction,
    )


def get_entry(db: Session, principal: CurrentUser | None, entry_id: int) -> CatalogEntry:
    authorize(principal, Operation.ENTRY_READ)
    logger.debug("Fetching entry with ID: %s", entry_id)
    entry = EntryStore(db).find_by_id(entry_id)
    if entry is None:
        raise NotFoundError(f"Entry not found with ID: {entry_id}")
    return _to_value(entry)


def create_entry(db: Session, principal: CurrentUser | None, entry: CatalogEntry) -> CatalogEntry:
    """Persist a new entry under a freshly assigned id. entry.id is ignored."""
    principal = authorize(principal, Operation.ENTRY_CREATE)
    validate_entry_fields(entry.title, entry.author, entry.publication_date, entry.genre, entry.price)
    key = validate_key(entry.key)

    store = EntryStore(db)
    if store.exists_by_key(key):
        raise _key_taken(key)

    row = Entry(
        title=entry.title,
        author=entry.author,
        publication_date=entry.publication_date,
        genre=entry.genre,
        price=entry.price,
        key=key,
    )
    try:
        row = store.save(row)
    except IntegrityError:
        raise _key_taken(key) from None
    logger.info("Entry created: id=%s key=%s by=%s", row.id, row.key, principal.id)
    return _to_value(row)


def update_entry(
    db: Session,
    principal: CurrentUser | None,
    entry_id: int,
    entry: CatalogEntry,
) -> CatalogEntry:
    """
    Replace every mutable field of an entry. The id never changes.

    The key is only re-validated and re-checked for uniqueness when it differs
    from the stored key, so saving an entry with its own key never conflicts.
    """
    principal = authorize(principal, Operation.ENTRY_UPDATE)
    validate_entry_fields(entry.title, entry.author, entry.publication_date, entry.genre, entry.price)

    store = EntryStore(db)
    row = store.find_by_id(entry_id)
    if row is None:
        raise NotFoundError(f"Entry not found with ID: {entry_id}")

    key = normalize_key(entry.key)
    if key != row.key:
        key = validate_key(entry.key)
        if store.exists_by_key(key, exclude_id=row.id):
            raise _key_taken(key)

    row.title = entry.title
    row.author = entry.author
    row.publication_date = entry.publication_date
    row.genre = entry.genre
    row.price = entry.price
    row.key = key
    try:
        row = store.save(row)
    except IntegrityError:
        raise _key_taken(key) from None
    logger.info("Entry updated: id=%s by=%s", row.id, principal.id)
    return _to_value(row)


def delete_entry(db: Session, principal: CurrentUser | None, entry_id: int) -> None:
    principal = authorize(principal, Operation.ENTRY_DELETE)
    if not EntryStore(db).delete_by_id(entry_id):
        raise NotFoundError(f"Entry not found with ID: {entry_id}")
    logger.info("Entry deleted: id=%s by=%s", entry_id, principal.id)
