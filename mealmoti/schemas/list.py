"""Shopping list and sharing schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from mealmoti.models.enums import ListStatus
from mealmoti.schemas.auth import UserResponse
from mealmoti.schemas.item import IngredientSelection


class ListCreate(BaseModel):
    """Create a new list.

    When the list is created from a recipe, ``servings`` scales the
    ingredient quantities and ``ingredient_selections`` picks the article,
    quantity or unit per ingredient id.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    status: ListStatus = ListStatus.DRAFT
    is_template: bool = False
    servings: int | None = Field(None, gt=0)
    ingredient_selections: dict[int, IngredientSelection] = Field(default_factory=dict)


class ListUpdate(BaseModel):
    """Update a list."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    status: ListStatus | None = None
    is_template: bool | None = None
    sort_order: int | None = None


class ListResponse(BaseModel):
    """List response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    status: ListStatus
    status_date: datetime | None
    total_cost: float | None
    is_template: bool
    sort_order: int
    owner_id: int
    template_id: int | None
    recipe_id: int | None
    created_at: datetime
    updated_at: datetime
    unchecked_count: int = 0
    can_edit: bool = False


class ShareCreate(BaseModel):
    """Share a list or store with another user."""

    email: EmailStr = Field(..., max_length=255)
    can_edit: bool = True


class ShareResponse(BaseModel):
    """Share grant including the grantee's public profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    resource_id: int
    user_id: int
    can_edit: bool
    user: UserResponse
    created_at: datetime
    updated_at: datetime
