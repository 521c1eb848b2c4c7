"""Credential store: user records behind a small repository interface."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.core.authorization import Role
from catalog.models.user import User


class UserStore:
    """
    Repository for User rows on a request-scoped Session.

    save() commits; a duplicate username or email surfaces as
    sqlalchemy.exc.IntegrityError after the session has been rolled back.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_by_username(self, username: str) -> User | None:
        return self.session.scalars(select(User).where(User.username == username)).first()

    def find_by_email(self, email: str) -> User | None:
        return self.session.scalars(select(User).where(User.email == email)).first()

    def exists_by_id(self, user_id: int) -> bool:
        return self._exists(User.id == user_id)

    def exists_by_username(self, username: str) -> bool:
        return self._exists(User.username == username)

    def exists_by_email(self, email: str) -> bool:
        return self._exists(User.email == email)

    def list_all(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.id)))

    def list_by_role(self, role: Role) -> list[User]:
        stmt = select(User).where(User.role == role.value).order_by(User.id)
        return list(self.session.scalars(stmt))

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(User)) or 0

    def count_by_role(self, role: Role) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == role.value)
        return self.session.scalar(stmt) or 0

    def save(self, user: User) -> User:
        self.session.add(user)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def delete_by_id(self, user_id: int) -> bool:
        user = self.session.get(User, user_id)
        if user is None:
            return False
        self.session.delete(user)
        self.session.commit()
        return True

    def _exists(self, condition) -> bool:
        return self.session.scalar(select(select(User.id).where(condition).exists())) or False
