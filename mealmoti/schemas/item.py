"""Item schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ItemCreate(BaseModel):
    """Create a new item.

    ``unit`` is free text ("2 kg", "gramos") normalized to a canonical unit
    when ``unit_id`` is not given.
    """

    name: str = Field(..., min_length=1, max_length=500)
    quantity: float | None = Field(None, gt=0)
    unit: str | None = Field(None, max_length=50)
    unit_id: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)
    article_id: int | None = None
    store_id: int | None = None
    sort_order: int = 0


class ItemUpdate(BaseModel):
    """Update an item."""

    name: str | None = Field(None, min_length=1, max_length=500)
    quantity: float | None = Field(None, gt=0)
    unit_id: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)
    sort_order: int | None = None


class ItemPurchaseRecord(BaseModel):
    """Record what was actually bought for an item."""

    purchased_quantity: float | None = Field(None, gt=0)
    price: float | None = Field(None, ge=0)
    purchased_at: datetime | None = None


class ItemResponse(BaseModel):
    """Item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    list_id: int
    name: str
    quantity: float | None
    unit_id: str | None
    notes: str | None
    article_id: int | None
    store_id: int | None
    checked: bool
    checked_at: datetime | None
    checked_by: int | None
    added_by: int | None
    purchased_quantity: float | None
    price: float | None
    purchased_at: datetime | None
    sort_order: int
    created_at: datetime
    updated_at: datetime


class ResetResponse(BaseModel):
    """Result of resetting checked items."""

    reset_count: int


class IngredientSelection(BaseModel):
    """Per-ingredient choice when turning a recipe into list items."""

    article_id: int | None = None
    quantity: float | None = Field(None, gt=0)
    unit_id: str | None = Field(None, max_length=50)


class ItemsFromRecipe(BaseModel):
    """Add a recipe's ingredients to a list.

    ``ingredient_selections`` is keyed by recipe ingredient id. Ingredients
    without a selection use the article, quantity and unit stored on the
    recipe.
    """

    recipe_id: int
    servings: int | None = Field(None, gt=0)
    ingredient_selections: dict[int, IngredientSelection] = Field(default_factory=dict)


class ItemsFromRecipeResponse(BaseModel):
    """Items added from a recipe and how many were already on the list."""

    added: int
    skipped: int
    items: list[ItemResponse]


class ItemFromStore(BaseModel):
    """Add an article as bought at a specific store."""

    article_id: int
    store_id: int
    quantity: float = Field(..., gt=0)
    unit: str | None = Field(None, max_length=50)
    unit_id: str | None = Field(None, max_length=50)
    notes: str | None = Field(None, max_length=2000)
