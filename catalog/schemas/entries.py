"""Catalog entry value type and listing schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntry(BaseModel):
    """
    The one shape of a catalog entry, used by the service, the API request body
    and the API response. id is None until the entry is persisted.
    Field rules (lengths, price, key format) are enforced by the catalog service
    after authorization, not at deserialization.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    title: str
    author: str
    publication_date: date
    genre: str | None = None
    price: Decimal
    key: str = Field(..., description="10- or 13-digit catalog identifier")


class EntryPage(BaseModel):
    """One page of catalog entries. page is zero-based."""

    items: list[CatalogEntry]
    page: int
    size: int
    total_items: int
    total_pages: int
    sort_field: str
    sort_direction: str
