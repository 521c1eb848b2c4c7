"""
Create a user (e.g. first admin). Run from project root:
  python -m catalog.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m catalog.scripts.create_user admin admin@example.com your-secure-password ADMIN
"""
import argparse
import sys

from catalog.core.authorization import Role
from catalog.core.database import SessionLocal
from catalog.core.errors import CatalogError
from catalog.services.identity import create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a catalog user (the only way to create an admin).")
    parser.add_argument("username", help="Username (3-50 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER.value,
        type=str.upper,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = create_user(db, args.username, args.email, args.password, Role(args.role))
    except CatalogError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
