"""List API endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mealmoti.api.dependencies import (
    get_access_resolver,
    get_current_user,
    get_list_service,
    get_sharing_service,
)
from mealmoti.database import get_db
from mealmoti.models.enums import ListStatus, ResourceKind
from mealmoti.models.item import Item
from mealmoti.models.list import ListShare, ShoppingList
from mealmoti.models.user import User
from mealmoti.schemas.list import (
    ListCreate,
    ListResponse,
    ListUpdate,
    ShareCreate,
    ShareResponse,
)
from mealmoti.services.access import AccessResolver, get_policy
from mealmoti.services.lists import ListService
from mealmoti.services.sharing import SharingService

router = APIRouter(prefix="/api/v1/lists", tags=["lists"])


def count_unchecked(db: Session, list_ids: list[int]) -> dict[int, int]:
    """Count pending items per list in one query."""
    if not list_ids:
        return {}
    counts = (
        db.query(Item.list_id, func.count(Item.id))
        .filter(
            Item.list_id.in_(list_ids),
            Item.checked.is_(False),
            Item.not_deleted(),
        )
        .group_by(Item.list_id)
        .all()
    )
    return dict(counts)


def build_list_response(
    db: Session, list_obj: ShoppingList, can_edit: bool, unchecked_count: int | None = None
) -> ListResponse:
    if unchecked_count is None:
        unchecked_count = count_unchecked(db, [list_obj.id]).get(list_obj.id, 0)
    list_response = ListResponse.model_validate(list_obj)
    list_response.unchecked_count = unchecked_count
    list_response.can_edit = can_edit
    return list_response


@router.get("", response_model=list[ListResponse])
async def get_lists(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    status_filter: Annotated[ListStatus | None, Query(alias="status")] = None,
    scope: Literal["all", "private", "shared", "from-recipes"] = "all",
):
    """Get lists owned by or shared with the current user."""
    query = db.query(ShoppingList).filter(ShoppingList.not_deleted())

    shared_ids = select(ListShare.list_id).where(ListShare.user_id == current_user.id)
    if scope == "private":
        # Owned and not shared with anyone
        query = query.filter(
            ShoppingList.owner_id == current_user.id,
            ShoppingList.id.not_in(select(ListShare.list_id)),
        )
    elif scope == "shared":
        query = query.filter(ShoppingList.id.in_(shared_ids))
    else:
        query = query.filter(get_policy(ResourceKind.LIST).readable_filter(current_user.id))
        if scope == "from-recipes":
            query = query.filter(ShoppingList.recipe_id.isnot(None))

    if status_filter is not None:
        query = query.filter(ShoppingList.status == status_filter.value)

    lists = query.order_by(ShoppingList.sort_order, ShoppingList.updated_at.desc()).all()

    list_ids = [lst.id for lst in lists]
    unchecked_counts = count_unchecked(db, list_ids)
    editable_shared = set()
    if list_ids:
        editable_shared = {
            list_id
            for (list_id,) in db.query(ListShare.list_id).filter(
                ListShare.user_id == current_user.id,
                ListShare.can_edit.is_(True),
                ListShare.list_id.in_(list_ids),
            )
        }

    return [
        build_list_response(
            db,
            lst,
            can_edit=lst.owner_id == current_user.id or lst.id in editable_shared,
            unchecked_count=unchecked_counts.get(lst.id, 0),
        )
        for lst in lists
    ]


@router.post("", response_model=ListResponse, status_code=status.HTTP_201_CREATED)
async def create_list(
    list_data: ListCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[ListService, Depends(get_list_service)],
    from_template: int | None = None,
    from_recipe: int | None = None,
):
    """Create a new list, optionally from a template or a recipe."""
    new_list = service.create_list(
        current_user, list_data, from_template=from_template, from_recipe=from_recipe
    )
    return build_list_response(db, new_list, can_edit=True)


@router.get("/{list_id}", response_model=ListResponse)
async def get_list(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Get a specific list."""
    lst, rights = access.require_read_with_access(current_user.id, ResourceKind.LIST, list_id)
    return build_list_response(db, lst, can_edit=rights.can_edit)


@router.put("/{list_id}", response_model=ListResponse)
async def update_list(
    list_id: int,
    list_data: ListUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[ListService, Depends(get_list_service)],
):
    """Update a list. Completing it records the total cost of checked items."""
    list_obj = service.update_list(current_user, list_id, list_data)
    return build_list_response(db, list_obj, can_edit=True)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_list(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Soft delete a list (owner only)."""
    list_obj = access.require_owner(
        current_user.id,
        ResourceKind.LIST,
        list_id,
        detail="Only the owner can delete this list",
    )
    list_obj.soft_delete()
    db.commit()


@router.get("/{list_id}/shares", response_model=list[ShareResponse])
async def get_list_shares(
    list_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Get the users a list is shared with."""
    return sharing.list_shares(current_user.id, ResourceKind.LIST, list_id)


@router.post(
    "/{list_id}/share", response_model=ShareResponse, status_code=status.HTTP_201_CREATED
)
async def share_list(
    list_id: int,
    share_data: ShareCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Share a list with another user, or change an existing grant."""
    return sharing.share_resource(
        current_user.id, ResourceKind.LIST, list_id, share_data.email, share_data.can_edit
    )


@router.delete("/{list_id}/share/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unshare_list(
    list_id: int,
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Remove a user's access to a list (owner only)."""
    sharing.revoke_share(current_user.id, ResourceKind.LIST, list_id, user_id)
