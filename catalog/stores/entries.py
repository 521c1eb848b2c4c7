"""Catalog store: entry rows, including the sorted/paginated listing query."""

from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.models.entry import Entry

# Attribute name -> column. Callers resolve user input against this first.
SORT_COLUMNS = {
    "id": Entry.id,
    "title": Entry.title,
    "author": Entry.author,
    "publication_date": Entry.publication_date,
    "genre": Entry.genre,
    "price": Entry.price,
    "key": Entry.key,
}


class EntryStore:
    """Repository for Entry rows. save() commits; duplicate keys raise IntegrityError."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, entry_id: int) -> Entry | None:
        return self.session.get(Entry, entry_id)

    def exists_by_id(self, entry_id: int) -> bool:
        stmt = select(select(Entry.id).where(Entry.id == entry_id).exists())
        return self.session.scalar(stmt) or False

    def exists_by_key(self, key: str, exclude_id: int | None = None) -> bool:
        """True if another entry holds key. exclude_id leaves one entry out of the check."""
        query = select(Entry.id).where(Entry.key == key)
        if exclude_id is not None:
            query = query.where(Entry.id != exclude_id)
        return self.session.scalar(select(query.exists())) or False

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(Entry)) or 0

    def find_page(
        self,
        offset: int,
        limit: int,
        sort_field: str,
        direction: Literal["asc", "desc"],
    ) -> list[Entry]:
        """Rows ordered by sort_field (ties by id ascending), then offset/limit."""
        column = SORT_COLUMNS[sort_field]
        order = column.desc() if direction == "desc" else column.asc()
        stmt = select(Entry).order_by(order, Entry.id.asc()).offset(offset).limit(limit)
        return list(self.session.scalars(stmt))

    def save(self, entry: Entry) -> Entry:
        self.session.add(entry)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(entry)
        return entry

    def delete_by_id(self, entry_id: int) -> bool:
        entry = self.session.get(Entry, entry_id)
        if entry is None:
            return False
        self.session.delete(entry)
        self.session.commit()
        return True
