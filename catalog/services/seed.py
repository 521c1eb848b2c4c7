"""Default accounts and sample catalog entries for a fresh database."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from catalog.core.authorization import Role
from catalog.models.entry import Entry
from catalog.services.identity import create_user
from catalog.services.validators import validate_entry_fields, validate_key
from catalog.stores.entries import EntryStore
from catalog.stores.users import UserStore

logger = logging.getLogger(__name__)

# (username, email, password, role)
DEFAULT_USERS = (
    ("admin", "admin@catalog.local", "admin123", Role.ADMIN),
    ("user", "user@catalog.local", "user123!", Role.USER),
)

# (title, author, publication_date, genre, price, key)
SAMPLE_ENTRIES = (
    ("Effective Java", "Joshua Bloch", date(2018, 1, 6), "Programming", "32.99", "9780134685991"),
    ("Clean Code", "Robert C. Martin", date(2008, 8, 11), "Programming", "28.99", "9780132350884"),
    ("Head First Java", "Kathy Sierra & Bert Bates", date(2005, 2, 9), "Programming", "25.99", "9780596009205"),
    ("Spring in Action", "Craig Walls", date(2018, 11, 27), "Java Framework", "34.99", "9781617294945"),
    ("Java: The Complete Reference", "Herbert Schildt", date(2021, 5, 15), "Programming", "30.99", "9781260440232"),
    ("Python Crash Course", "Eric Matthes", date(2019, 5, 3), "Programming", "27.99", "9781593279288"),
    ("Fluent Python", "Luciano Ramalho", date(2022, 4, 19), "Programming", "36.99", "9781492056355"),
    (
        "Design Patterns: Elements of Reusable Object-Oriented Software",
        "Erich Gamma",
        date(1994, 10, 31),
        "Software Design",
        "39.99",
        "9780201633610",
    ),
    ("Building Microservices", "Sam Newman", date(2021, 1, 12), "Architecture", "33.99", "9781492034025"),
    (
        "Cloud Computing: Principles and Paradigms",
        "Rajkumar Buyya",
        date(2011, 2, 17),
        "Cloud Computing",
        "29.99",
        "9781118002209",
    ),
)


def seed_default_users(db: Session) -> int:
    """Create the default accounts that do not exist yet. Returns how many were created."""
    users = UserStore(db)
    created = 0
    for username, email, password, role in DEFAULT_USERS:
        if users.exists_by_username(username):
            continue
        create_user(db, username, email, password, role)
        logger.info("Default %s account created: %s", role.value, username)
        created += 1
    return created


def seed_sample_entries(db: Session) -> int:
    """Insert the sample entries, but only into an empty catalog."""
    store = EntryStore(db)
    if store.count() > 0:
        return 0
    for title, author, published, genre, price, key in SAMPLE_ENTRIES:
        validate_entry_fields(title, author, published, genre, Decimal(price))
        store.save(
            Entry(
                title=title,
                author=author,
                publication_date=published,
                genre=genre,
                price=Decimal(price),
                key=validate_key(key),
            )
        )
    logger.info("Created %s sample entries", len(SAMPLE_ENTRIES))
    return len(SAMPLE_ENTRIES)


def seed_sample_data(db: Session) -> tuple[int, int]:
    """Idempotent: returns (users_created, entries_created)."""
    logger.info("Initializing sample data...")
    result = (seed_default_users(db), seed_sample_entries(db))
    logger.info("Sample data initialization completed")
    return result
