"""Item API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from mealmoti.api.dependencies import get_current_user, get_item_service
from mealmoti.models.user import User
from mealmoti.schemas.item import (
    ItemCreate,
    ItemFromStore,
    ItemPurchaseRecord,
    ItemResponse,
    ItemsFromRecipe,
    ItemsFromRecipeResponse,
    ItemUpdate,
    ResetResponse,
)
from mealmoti.services.items import ItemService

router = APIRouter(prefix="/api/v1", tags=["items"])


@router.get("/lists/{list_id}/items", response_model=list[ItemResponse])
def get_items(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
    include_checked: bool = Query(default=True, description="Include checked items"),
):
    """Get all items for a list."""
    return service.list_items(current_user, list_id, include_checked=include_checked)


@router.post(
    "/lists/{list_id}/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED
)
def create_item(
    list_id: int,
    item_data: ItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Add an item to a list."""
    return service.create_item(current_user, list_id, item_data)


@router.post(
    "/lists/{list_id}/items/from-recipe",
    response_model=ItemsFromRecipeResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_items_from_recipe(
    list_id: int,
    recipe_data: ItemsFromRecipe,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Add a recipe's ingredients to a list, skipping articles already on it."""
    items, skipped = service.add_from_recipe(current_user, list_id, recipe_data)
    return ItemsFromRecipeResponse(
        added=len(items),
        skipped=skipped,
        items=[ItemResponse.model_validate(item) for item in items],
    )


@router.post(
    "/lists/{list_id}/items/from-store",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_item_from_store(
    list_id: int,
    item_data: ItemFromStore,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Add an article that is sold at the given store."""
    return service.add_from_store(current_user, list_id, item_data)


@router.post("/lists/{list_id}/items/reset", response_model=ResetResponse)
def reset_checked_items(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Uncheck every checked item on a list so it can be reused."""
    reset_count = service.reset_checked(current_user, list_id)
    return ResetResponse(reset_count=reset_count)


@router.put("/items/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    item_data: ItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Update an item."""
    return service.update_item(current_user, item_id, item_data)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Soft delete an item."""
    service.delete_item(current_user, item_id)


@router.post("/items/{item_id}/check", response_model=ItemResponse)
def check_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Mark an item as checked."""
    return service.check_item(current_user, item_id)


@router.post("/items/{item_id}/uncheck", response_model=ItemResponse)
def uncheck_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Mark an item as pending again."""
    return service.uncheck_item(current_user, item_id)


@router.post("/items/{item_id}/purchase", response_model=ItemResponse)
def record_item_purchase(
    item_id: int,
    purchase_data: ItemPurchaseRecord,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ItemService, Depends(get_item_service)],
):
    """Record the quantity and price actually paid for an item."""
    return service.record_item_purchase(current_user, item_id, purchase_data)
