"""Product, article, store and unit schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mealmoti.models.enums import StoreType


class UnitResponse(BaseModel):
    """Canonical unit."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    symbol: str
    description: str | None


class ProductCreate(BaseModel):
    """Create a product."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    is_general: bool = False


class ProductUpdate(BaseModel):
    """Update a product."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class ProductResponse(BaseModel):
    """Product response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    is_general: bool
    created_by_id: int | None
    created_at: datetime


class ArticleCreate(BaseModel):
    """Create an article (a concrete variant of a product)."""

    product_id: int
    name: str = Field(..., min_length=1, max_length=255)
    brand: str | None = Field(None, max_length=255)
    variant: str | None = Field(None, max_length=255)
    suggested_price: float | None = Field(None, ge=0)
    is_general: bool = False


class ArticleUpdate(BaseModel):
    """Update an article."""

    name: str | None = Field(None, min_length=1, max_length=255)
    brand: str | None = Field(None, max_length=255)
    variant: str | None = Field(None, max_length=255)
    suggested_price: float | None = Field(None, ge=0)


class ArticleResponse(BaseModel):
    """Article response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    name: str
    brand: str | None
    variant: str | None
    suggested_price: float | None
    is_general: bool
    created_by_id: int | None
    created_at: datetime


class StoreCreate(BaseModel):
    """Create a store."""

    name: str = Field(..., min_length=1, max_length=255)
    type: StoreType = StoreType.SUPERMARKET
    address: str | None = Field(None, max_length=500)
    is_general: bool = False


class StoreUpdate(BaseModel):
    """Update a store."""

    name: str | None = Field(None, min_length=1, max_length=255)
    type: StoreType | None = None
    address: str | None = Field(None, max_length=500)


class StoreResponse(BaseModel):
    """Store response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: StoreType
    address: str | None
    is_general: bool
    created_by_id: int | None
    created_at: datetime


class ArticleStoreUpsert(BaseModel):
    """Set an article's price/availability at a store."""

    price: float | None = Field(None, ge=0)
    available: bool = True


class ArticleStoreResponse(BaseModel):
    """Article availability at a store."""

    model_config = ConfigDict(from_attributes=True)

    article_id: int
    store_id: int
    price: float | None
    available: bool
    last_checked_at: datetime | None
