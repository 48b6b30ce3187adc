"""Recipe schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# --- Recipe Ingredient ---


class RecipeIngredientCreate(BaseModel):
    """Create a recipe ingredient."""

    product_id: int
    article_id: int | None = None
    quantity: float = Field(..., gt=0)
    unit: str | None = Field(None, max_length=50)
    unit_id: str | None = Field(None, max_length=50)
    is_optional: bool = False
    notes: str | None = Field(None, max_length=500)
    sort_order: int | None = None


class RecipeIngredientUpdate(BaseModel):
    """Update a recipe ingredient."""

    product_id: int | None = None
    quantity: float | None = Field(None, gt=0)
    unit: str | None = Field(None, max_length=50)
    unit_id: str | None = Field(None, max_length=50)
    is_optional: bool | None = None
    notes: str | None = Field(None, max_length=500)
    sort_order: int | None = None


class IngredientArticleSelect(BaseModel):
    """Pick (or clear) the concrete article for an ingredient."""

    article_id: int | None


class RecipeIngredientResponse(BaseModel):
    """Recipe ingredient response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipe_id: int
    product_id: int
    article_id: int | None
    quantity: float
    unit_id: str | None
    is_optional: bool
    notes: str | None
    sort_order: int


# --- Recipe ---


class RecipeCreate(BaseModel):
    """Create a new recipe."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    instructions: str | None = Field(None, max_length=50000)
    servings: int | None = Field(None, gt=0)
    prep_time: int | None = Field(None, gt=0)
    cook_time: int | None = Field(None, gt=0)
    is_general: bool = False
    ingredients: list[RecipeIngredientCreate] = Field(..., min_length=1)


class RecipeUpdate(BaseModel):
    """Update a recipe."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    instructions: str | None = Field(None, max_length=50000)
    servings: int | None = Field(None, gt=0)
    prep_time: int | None = Field(None, gt=0)
    cook_time: int | None = Field(None, gt=0)
    is_general: bool | None = None


class RecipeResponse(BaseModel):
    """Recipe response with ingredients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_by_id: int | None
    is_general: bool
    original_recipe_id: int | None
    name: str
    description: str | None
    instructions: str | None
    servings: int | None
    prep_time: int | None
    cook_time: int | None
    ingredients: list[RecipeIngredientResponse]
    created_at: datetime
    updated_at: datetime


class RecipeListResponse(BaseModel):
    """Paginated recipe listing."""

    recipes: list[RecipeResponse]
    total: int
