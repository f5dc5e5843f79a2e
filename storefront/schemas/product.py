"""Product Schemas — catalogue payloads and the product filter.

Invariants:
    - price is non-negative on create and update
    - id and timestamps are never accepted on write
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common import EntityFilter


class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=200)
    price: float = Field(ge=0)
    rating: float = Field(0.0, ge=0)
    genre: str = Field(max_length=100)
    category: str = Field(max_length=100)
    description: str
    support: str = Field(max_length=50)
    image: str = Field(max_length=500)


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=200)
    price: float | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0)
    genre: str | None = Field(None, max_length=100)
    category: str | None = Field(None, max_length=100)
    description: str | None = None
    support: str | None = Field(None, max_length=50)
    image: str | None = Field(None, max_length=500)


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    price: float
    rating: float
    genre: str
    category: str
    description: str
    support: str
    image: str
    created_at: datetime
    updated_at: datetime


class ProductFilter(EntityFilter):
    title: str | None = None
    price: float | None = None
    rating: float | None = None
    genre: str | None = None
    category: str | None = None
    description: str | None = None
    support: str | None = None
    image: str | None = None
