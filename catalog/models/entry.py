"""ORM model for catalog entries."""

from sqlalchemy import CheckConstraint, Column, Date, Integer, Numeric, String

from catalog.models.base import Base


class Entry(Base):
    """
    One catalog entry. key is the 10- or 13-digit catalog identifier, stored
    trimmed; the unique constraint is what makes concurrent creates safe.
    """

    __tablename__ = "catalog_entries"
    __table_args__ = (CheckConstraint("price > 0", name="ck_catalog_entries_price_positive"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False, index=True)
    author = Column(String(50), nullable=False)
    publication_date = Column(Date, nullable=False)
    genre = Column(String(50), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    key = Column(String(13), nullable=False, unique=True, index=True)
