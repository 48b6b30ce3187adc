"""List service: creating lists from templates or recipes and status changes."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from mealmoti.models.enums import ListStatus, ResourceKind
from mealmoti.models.item import Item
from mealmoti.models.list import ShoppingList
from mealmoti.models.recipe import Recipe
from mealmoti.models.user import User
from mealmoti.schemas.list import ListCreate, ListUpdate
from mealmoti.services.access import AccessResolver
from mealmoti.services.errors import InvalidInputError
from mealmoti.services.items import ItemService

logger = logging.getLogger(__name__)

# Item fields carried over when a list is created from a template
TEMPLATE_ITEM_FIELDS = (
    "name",
    "quantity",
    "unit_id",
    "notes",
    "article_id",
    "store_id",
    "sort_order",
)


class ListService:
    """Service for list operations that go beyond plain column updates."""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessResolver(db)
        self.items = ItemService(db)

    def create_list(
        self,
        user: User,
        data: ListCreate,
        from_template: int | None = None,
        from_recipe: int | None = None,
    ) -> ShoppingList:
        """Create a list, optionally seeded from a template and/or a recipe.

        Template items are copied as pending items without purchase history.
        Recipe ingredients are added after them, in recipe order. Every source
        is validated before anything is written.
        """
        new_list = ShoppingList(
            name=data.name.strip(),
            description=data.description,
            status=data.status.value,
            is_template=data.is_template,
            owner_id=user.id,
            template_id=from_template,
            recipe_id=from_recipe,
        )

        if from_template is not None:
            template: ShoppingList = self.access.require_read(
                user.id, ResourceKind.LIST, from_template
            )
            if not template.is_template:
                raise InvalidInputError(f"List {template.id} is not a template")
            for source in self._live_items(template.id):
                item = Item(**{field: getattr(source, field) for field in TEMPLATE_ITEM_FIELDS})
                item.checked = False
                item.added_by = user.id
                new_list.items.append(item)

        if from_recipe is not None:
            recipe: Recipe = self.access.require_read(user.id, ResourceKind.RECIPE, from_recipe)
            start_order = max((item.sort_order or 0 for item in new_list.items), default=-1) + 1
            recipe_items, _ = self.items.build_recipe_items(
                user,
                recipe,
                data.ingredient_selections,
                servings=data.servings,
                skip_article_ids={i.article_id for i in new_list.items if i.article_id},
                start_order=start_order,
            )
            new_list.items.extend(recipe_items)

        self.db.add(new_list)
        self.db.commit()
        self.db.refresh(new_list)

        if from_template is not None or from_recipe is not None:
            logger.info(
                f"User {user.id} created list {new_list.id} with {len(new_list.items)} items "
                f"(template={from_template}, recipe={from_recipe})"
            )
        return new_list

    def update_list(self, user: User, list_id: int, data: ListUpdate) -> ShoppingList:
        """Update a list the user can edit.

        A status change stamps ``status_date``. Completing a list stores the
        total cost of its checked, priced items; leaving ``completed`` clears it.
        """
        list_obj: ShoppingList = self.access.require_edit(user.id, ResourceKind.LIST, list_id)

        if data.name is not None:
            list_obj.name = data.name.strip()
        if data.description is not None:
            list_obj.description = data.description
        if data.is_template is not None:
            list_obj.is_template = data.is_template
        if data.sort_order is not None:
            list_obj.sort_order = data.sort_order
        if data.status is not None:
            self._change_status(list_obj, data.status)

        self.db.commit()
        self.db.refresh(list_obj)
        return list_obj

    def _change_status(self, list_obj: ShoppingList, new_status: ListStatus) -> None:
        previous = list_obj.status
        list_obj.status = new_status.value
        list_obj.status_date = datetime.now(UTC)

        if new_status == ListStatus.COMPLETED:
            total = sum(
                item.price * item.purchased_quantity
                for item in self._live_items(list_obj.id)
                if item.checked and item.price is not None and item.purchased_quantity is not None
            )
            list_obj.total_cost = total if total > 0 else None
            logger.info(f"List {list_obj.id} completed, total cost {list_obj.total_cost}")
        elif previous == ListStatus.COMPLETED.value:
            list_obj.total_cost = None

    def _live_items(self, list_id: int) -> list[Item]:
        return (
            self.db.query(Item)
            .filter(Item.list_id == list_id, Item.not_deleted())
            .order_by(Item.sort_order, Item.id)
            .all()
        )
