"""Tests for catalog.services.entries: gating, key rules, listing and round-trips."""

import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

from catalog.core.authorization import Role
from catalog.core.config import settings
from catalog.core.database import build_engine, create_session_factory, init_db
from catalog.core.errors import (
    INVALID_KEY,
    KEY_TAKEN,
    AccessDeniedError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)
from catalog.schemas.auth import CurrentUser
from catalog.schemas.entries import CatalogEntry
from catalog.services import entries
from catalog.services.entries import resolve_sort_direction, resolve_sort_field
from catalog.stores.entries import EntryStore

ADMIN = CurrentUser(id=1, username="admin", role=Role.ADMIN)
USER = CurrentUser(id=2, username="reader", role=Role.USER)


def _entry(**overrides: object) -> CatalogEntry:
    fields = {
        "title": "Fluent Python",
        "author": "Luciano Ramalho",
        "publication_date": date(2022, 4, 19),
        "genre": "Programming",
        "price": Decimal("36.99"),
        "key": "9780123456789",
    }
    fields.update(overrides)
    return CatalogEntry(**fields)


class EntryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = build_engine("sqlite://")
        init_db(self.engine)
        self.db = create_session_factory(self.engine)()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestCreateAndRead(EntryTestCase):
    def test_round_trip(self) -> None:
        entry = _entry()
        created = entries.create_entry(self.db, ADMIN, entry)
        self.assertIsNotNone(created.id)
        fetched = entries.get_entry(self.db, USER, created.id)
        self.assertEqual(fetched, entry.model_copy(update={"id": created.id}))

    def test_body_id_is_ignored(self) -> None:
        created = entries.create_entry(self.db, ADMIN, _entry(id=999))
        self.assertNotEqual(created.id, 999)

    def test_key_is_stored_trimmed(self) -> None:
        created = entries.create_entry(self.db, ADMIN, _entry(key="  0306406152 "))
        self.assertEqual(created.key, "0306406152")

    def test_duplicate_key_is_key_taken(self) -> None:
        entries.create_entry(self.db, ADMIN, _entry(key="9780123456789"))
        with self.assertRaises(ConflictError) as ctx:
            entries.create_entry(self.db, ADMIN, _entry(title="Another", key="9780123456789"))
        self.assertEqual(ctx.exception.code, KEY_TAKEN)
        self.assertEqual(EntryStore(self.db).count(), 1)

    def test_duplicate_key_caught_by_unique_constraint(self) -> None:
        entries.create_entry(self.db, ADMIN, _entry(key="9780123456789"))
        with patch.object(EntryStore, "exists_by_key", return_value=False):
            with self.assertRaises(ConflictError) as ctx:
                entries.create_entry(self.db, ADMIN, _entry(title="Another", key="9780123456789"))
        self.assertEqual(ctx.exception.code, KEY_TAKEN)
        self.assertEqual(EntryStore(self.db).count(), 1)

    def test_invalid_key_is_rejected(self) -> None:
        with self.assertRaises(InvalidInputError) as ctx:
            entries.create_entry(self.db, ADMIN, _entry(key="978-0-7432-7356-5"))
        self.assertEqual(ctx.exception.code, INVALID_KEY)

    def test_invalid_field_is_rejected_before_key(self) -> None:
        with self.assertRaises(InvalidInputError) as ctx:
            entries.create_entry(self.db, ADMIN, _entry(price=Decimal("0"), key="bad"))
        self.assertEqual(ctx.exception.field, "price")

    def test_missing_entry_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            entries.get_entry(self.db, USER, 42)

    def test_reading_requires_authentication(self) -> None:
        with self.assertRaises(UnauthenticatedError):
            entries.get_entry(self.db, None, 1)
        with self.assertRaises(UnauthenticatedError):
            entries.list_entries(self.db, None)


class TestUserRoleCannotMutate(EntryTestCase):
    """USER callers are denied before any validation or persistence happens."""

    def test_denied_regardless_of_payload(self) -> None:
        invalid = _entry(title="", price=Decimal("-1"), key="nope")
        for payload in (_entry(), invalid):
            with self.assertRaises(AccessDeniedError):
                entries.create_entry(self.db, USER, payload)
        self.assertEqual(EntryStore(self.db).count(), 0)

    def test_session_is_never_touched(self) -> None:
        db = MagicMock()
        with self.assertRaises(AccessDeniedError):
            entries.create_entry(db, USER, _entry(key="nope"))
        with self.assertRaises(AccessDeniedError):
            entries.update_entry(db, USER, 1, _entry())
        with self.assertRaises(AccessDeniedError):
            entries.delete_entry(db, USER, 1)
        self.assertEqual(db.method_calls, [])

    def test_existing_entry_is_unchanged(self) -> None:
        created = entries.create_entry(self.db, ADMIN, _entry())
        with self.assertRaises(AccessDeniedError):
            entries.update_entry(self.db, USER, created.id, _entry(title="Changed"))
        with self.assertRaises(AccessDeniedError):
            entries.delete_entry(self.db, USER, created.id)
        self.assertEqual(entries.get_entry(self.db, USER, created.id).title, "Fluent Python")


class TestUpdate(EntryTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.first = entries.create_entry(self.db, ADMIN, _entry(key="9780123456789"))
        self.second = entries.create_entry(self.db, ADMIN, _entry(title="Clean Code", key="9780132350884"))

    def test_keeping_own_key_is_not_a_conflict(self) -> None:
        updated = entries.update_entry(self.db, ADMIN, self.first.id, _entry(title="Fluent Python 2e"))
        self.assertEqual(updated.title, "Fluent Python 2e")
        self.assertEqual(updated.key, "9780123456789")
        self.assertEqual(updated.id, self.first.id)

    def test_own_key_with_whitespace_is_unchanged(self) -> None:
        updated = entries.update_entry(self.db, ADMIN, self.first.id, _entry(key=" 9780123456789 "))
        self.assertEqual(updated.key, "9780123456789")

    def test_taking_another_entrys_key_is_key_taken(self) -> None:
        with self.assertRaises(ConflictError) as ctx:
            entries.update_entry(self.db, ADMIN, self.first.id, _entry(key="9780132350884"))
        self.assertEqual(ctx.exception.code, KEY_TAKEN)

    def test_taken_key_caught_by_unique_constraint(self) -> None:
        with patch.object(EntryStore, "exists_by_key", return_value=False):
            with self.assertRaises(ConflictError) as ctx:
                entries.update_entry(self.db, ADMIN, self.first.id, _entry(key="9780132350884"))
        self.assertEqual(ctx.exception.code, KEY_TAKEN)
        self.assertEqual(entries.get_entry(self.db, ADMIN, self.first.id).key, "9780123456789")

    def test_new_invalid_key_is_rejected(self) -> None:
        with self.assertRaises(InvalidInputError) as ctx:
            entries.update_entry(self.db, ADMIN, self.first.id, _entry(key="12345"))
        self.assertEqual(ctx.exception.code, INVALID_KEY)

    def test_new_free_key_is_accepted(self) -> None:
        updated = entries.update_entry(self.db, ADMIN, self.first.id, _entry(key="0306406152"))
        self.assertEqual(updated.key, "0306406152")

    def test_all_mutable_fields_are_replaced_and_id_kept(self) -> None:
        replacement = _entry(
            id=12345,
            title="New Title",
            author="New Author",
            publication_date=date(2001, 1, 1),
            genre=None,
            price=Decimal("9.50"),
        )
        updated = entries.update_entry(self.db, ADMIN, self.first.id, replacement)
        self.assertEqual(updated, replacement.model_copy(update={"id": self.first.id}))
        self.assertEqual(entries.get_entry(self.db, ADMIN, self.first.id), updated)

    def test_missing_entry_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            entries.update_entry(self.db, ADMIN, 9999, _entry())


class TestDelete(EntryTestCase):
    def test_delete_is_final(self) -> None:
        created = entries.create_entry(self.db, ADMIN, _entry())
        entries.delete_entry(self.db, ADMIN, created.id)
        with self.assertRaises(NotFoundError):
            entries.get_entry(self.db, ADMIN, created.id)
        with self.assertRaises(NotFoundError):
            entries.delete_entry(self.db, ADMIN, created.id)

    def test_key_is_free_after_delete(self) -> None:
        created = entries.create_entry(self.db, ADMIN, _entry())
        entries.delete_entry(self.db, ADMIN, created.id)
        entries.create_entry(self.db, ADMIN, _entry())


class TestListing(EntryTestCase):
    def setUp(self) -> None:
        super().setUp()
        for title, price, key in (
            ("Beta", "20.00", "1111111111"),
            ("Alpha", "30.00", "2222222222"),
            ("Gamma", "10.00", "3333333333"),
        ):
            entries.create_entry(self.db, ADMIN, _entry(title=title, price=Decimal(price), key=key))

    def _titles(self, **kwargs: object) -> list[str]:
        return [e.title for e in entries.list_entries(self.db, USER, **kwargs).items]

    def test_bogus_sort_field_behaves_like_title(self) -> None:
        bogus = entries.list_entries(self.db, USER, sort_field="bogus", sort_direction="asc")
        title = entries.list_entries(self.db, USER, sort_field="title", sort_direction="asc")
        self.assertEqual(bogus.items, title.items)
        self.assertEqual(bogus.sort_field, "title")
        self.assertEqual([e.title for e in title.items], ["Alpha", "Beta", "Gamma"])

    def test_direction(self) -> None:
        self.assertEqual(self._titles(sort_field="title", sort_direction="DESC"), ["Gamma", "Beta", "Alpha"])
        self.assertEqual(self._titles(sort_field="title", sort_direction="descending"), ["Alpha", "Beta", "Gamma"])
        self.assertEqual(self._titles(sort_field="title", sort_direction=None), ["Alpha", "Beta", "Gamma"])

    def test_sort_by_price_and_camel_case_field(self) -> None:
        self.assertEqual(self._titles(sort_field="price", sort_direction="asc"), ["Gamma", "Beta", "Alpha"])
        page = entries.list_entries(self.db, USER, sort_field="publicationDate")
        self.assertEqual(page.sort_field, "publication_date")

    def test_pagination(self) -> None:
        page = entries.list_entries(self.db, USER, page=1, size=2, sort_field="title", sort_direction="asc")
        self.assertEqual([e.title for e in page.items], ["Gamma"])
        self.assertEqual(page.total_items, 3)
        self.assertEqual(page.total_pages, 2)
        beyond = entries.list_entries(self.db, USER, page=5, size=2)
        self.assertEqual(beyond.items, [])

    def test_size_is_capped_and_bounds_checked(self) -> None:
        page = entries.list_entries(self.db, USER, size=settings.MAX_PAGE_SIZE + 50)
        self.assertEqual(page.size, settings.MAX_PAGE_SIZE)
        with self.assertRaises(InvalidInputError):
            entries.list_entries(self.db, USER, page=-1)
        with self.assertRaises(InvalidInputError):
            entries.list_entries(self.db, USER, size=0)

    def test_page_beyond_maximum_offset_is_invalid(self) -> None:
        with self.assertRaises(InvalidInputError) as ctx:
            entries.list_entries(self.db, USER, page=10**18, size=10)
        self.assertEqual(ctx.exception.field, "page")
        last = entries.MAX_OFFSET // 10
        self.assertEqual(entries.list_entries(self.db, USER, page=last, size=10).items, [])


class TestSortResolution(unittest.TestCase):
    def test_allow_list(self) -> None:
        for raw, expected in (
            ("id", "id"),
            ("TITLE", "title"),
            ("publicationDate", "publication_date"),
            ("key", "key"),
            ("password_hash", "title"),
            ("title; DROP TABLE", "title"),
            (None, "title"),
        ):
            with self.subTest(raw=raw):
                self.assertEqual(resolve_sort_field(raw), expected)

    def test_direction(self) -> None:
        self.assertEqual(resolve_sort_direction("desc"), "desc")
        self.assertEqual(resolve_sort_direction("Desc"), "desc")
        self.assertEqual(resolve_sort_direction("asc"), "asc")
        self.assertEqual(resolve_sort_direction(""), "asc")
