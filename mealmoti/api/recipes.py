"""Recipe API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from mealmoti.api.dependencies import Pagination, get_current_user, get_recipe_service
from mealmoti.models.user import User
from mealmoti.schemas.recipe import (
    IngredientArticleSelect,
    RecipeCreate,
    RecipeIngredientCreate,
    RecipeIngredientResponse,
    RecipeIngredientUpdate,
    RecipeListResponse,
    RecipeResponse,
    RecipeUpdate,
)
from mealmoti.services.recipes import RecipeService

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
    pagination: Annotated[Pagination, Depends()],
    search: str | None = Query(default=None, max_length=255),
    general: bool = Query(default=False, description="Only general recipes"),
):
    """List the user's own recipes and the general catalog."""
    recipes, total = service.list_recipes(
        current_user.id,
        search=search,
        general_only=general,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return RecipeListResponse(
        recipes=[RecipeResponse.model_validate(recipe) for recipe in recipes],
        total=total,
    )


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_data: RecipeCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Create a new recipe with ingredients."""
    return service.create_recipe(current_user.id, recipe_data)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Get a recipe with ingredients."""
    return service.get_recipe(current_user.id, recipe_id)


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: int,
    recipe_data: RecipeUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Update a recipe."""
    return service.update_recipe(current_user.id, recipe_id, recipe_data)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Delete a recipe."""
    service.delete_recipe(current_user.id, recipe_id)


@router.post(
    "/{recipe_id}/fork", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED
)
async def fork_recipe(
    recipe_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Copy a recipe into a private recipe owned by the current user."""
    return service.fork_recipe(current_user.id, recipe_id)


@router.post(
    "/{recipe_id}/ingredients",
    response_model=RecipeIngredientResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_ingredient(
    recipe_id: int,
    ingredient_data: RecipeIngredientCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Add an ingredient to a recipe."""
    return service.add_ingredient(current_user.id, recipe_id, ingredient_data)


@router.put(
    "/{recipe_id}/ingredients/{ingredient_id}/article",
    response_model=RecipeIngredientResponse,
)
async def select_ingredient_article(
    recipe_id: int,
    ingredient_id: int,
    selection: IngredientArticleSelect,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Choose which article is bought for an ingredient."""
    return service.select_ingredient_article(
        current_user.id, recipe_id, ingredient_id, selection.article_id
    )


@router.put(
    "/{recipe_id}/ingredients/{ingredient_id}",
    response_model=RecipeIngredientResponse,
)
async def update_ingredient(
    recipe_id: int,
    ingredient_id: int,
    ingredient_data: RecipeIngredientUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Update an ingredient of a recipe (creator only)."""
    return service.update_ingredient(current_user.id, recipe_id, ingredient_id, ingredient_data)


@router.delete(
    "/{recipe_id}/ingredients/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_ingredient(
    recipe_id: int,
    ingredient_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Remove an ingredient from a recipe (creator only)."""
    service.delete_ingredient(current_user.id, recipe_id, ingredient_id)
