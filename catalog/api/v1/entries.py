"""Catalog entry endpoints: paginated listing, lookup and admin-only mutations."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from catalog.api.v1.auth import require
from catalog.core.authorization import Operation
from catalog.core.config import settings
from catalog.core.database import get_db
from catalog.schemas.auth import CurrentUser
from catalog.schemas.entries import CatalogEntry, EntryPage
from catalog.services import entries

router = APIRouter()


@router.get("", response_model=EntryPage)
def list_entries(
    principal: Annotated[CurrentUser, Depends(require(Operation.ENTRY_LIST))],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(description="Zero-based page index")] = 0,
    size: Annotated[int, Query(description="Page size")] = settings.DEFAULT_PAGE_SIZE,
    sort_by: Annotated[
        str,
        Query(description="id, title, author, publicationDate, genre, price or key; others sort by title"),
    ] = "title",
    sort_dir: Annotated[str, Query(description="'desc' for descending, anything else ascending")] = "desc",
) -> EntryPage:
    """List catalog entries one page at a time."""
    return entries.list_entries(db, principal, page, size, sort_by, sort_dir)


@router.get("/{entry_id}", response_model=CatalogEntry)
def get_entry(
    entry_id: int,
    principal: Annotated[CurrentUser, Depends(require(Operation.ENTRY_READ))],
    db: Annotated[Session, Depends(get_db)],
) -> CatalogEntry:
    return entries.get_entry(db, principal, entry_id)


@router.post("", response_model=CatalogEntry, status_code=status.HTTP_201_CREATED)
def create_entry(
    body: CatalogEntry,
    principal: Annotated[CurrentUser, Depends(require(Operation.ENTRY_CREATE))],
    db: Annotated[Session, Depends(get_db)],
) -> CatalogEntry:
    """Create an entry (admin only). Any id in the body is ignored."""
    return entries.create_entry(db, principal, body)


@router.put("/{entry_id}", response_model=CatalogEntry)
def update_entry(
    entry_id: int,
    body: CatalogEntry,
    principal: Annotated[CurrentUser, Depends(require(Operation.ENTRY_UPDATE))],
    db: Annotated[Session, Depends(get_db)],
) -> CatalogEntry:
    """Replace all fields of an entry (admin only). The id in the path wins."""
    return entries.update_entry(db, principal, entry_id, body)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    entry_id: int,
    principal: Annotated[CurrentUser, Depends(require(Operation.ENTRY_DELETE))],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    entries.delete_entry(db, principal, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
