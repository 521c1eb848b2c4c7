"""
CLI entrypoint for sample-data seeding. Run from project root:

  python -m catalog.scripts.seed

Creates the default admin/user accounts and ten sample entries. Safe to re-run.
"""

import logging
import sys

from catalog.core.config import get_settings
from catalog.core.database import SessionLocal, init_db
from catalog.services.seed import seed_sample_data

logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Seed the configured database."""
    if get_settings().DB_CREATE_ALL:
        init_db()
    db = SessionLocal()
    try:
        users_created, entries_created = seed_sample_data(db)
        logger.info("Seeding completed: users_created=%s entries_created=%s", users_created, entries_created)
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
