"""Item service for the shared shopping-list item lifecycle."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from mealmoti.models.catalog import Article, ArticleStore, Store
from mealmoti.models.enums import ResourceKind
from mealmoti.models.item import Item
from mealmoti.models.recipe import Recipe
from mealmoti.models.unit import Unit
from mealmoti.models.user import User
from mealmoti.schemas.item import (
    IngredientSelection,
    ItemCreate,
    ItemFromStore,
    ItemPurchaseRecord,
    ItemsFromRecipe,
    ItemUpdate,
)
from mealmoti.services.access import AccessResolver
from mealmoti.services.errors import InvalidInputError, NotFoundError
from mealmoti.services.units import normalize_unit

logger = logging.getLogger(__name__)

EDIT_DENIED = "You don't have permission to edit this list"


class ItemService:
    """Create, check, uncheck and reset items on lists the user can edit."""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessResolver(db)

    def list_items(self, user: User, list_id: int, include_checked: bool = True) -> list[Item]:
        """Get the live items of a list the user can read."""
        self.access.require_read(user.id, ResourceKind.LIST, list_id)

        query = self.db.query(Item).filter(Item.list_id == list_id, Item.not_deleted())
        if not include_checked:
            query = query.filter(Item.checked.is_(False))
        return query.order_by(Item.sort_order, Item.id).all()

    def create_item(self, user: User, list_id: int, data: ItemCreate) -> Item:
        """Add a pending item to a list."""
        self.access.require_edit(user.id, ResourceKind.LIST, list_id, detail=EDIT_DENIED)

        if data.article_id is not None:
            self.access.require_read(user.id, ResourceKind.ARTICLE, data.article_id)
        if data.store_id is not None:
            self.access.require_read(user.id, ResourceKind.STORE, data.store_id)

        item = Item(
            list_id=list_id,
            name=data.name.strip(),
            quantity=data.quantity,
            unit_id=self._resolve_unit(data.unit_id, data.unit),
            notes=data.notes,
            article_id=data.article_id,
            store_id=data.store_id,
            sort_order=data.sort_order,
            checked=False,
            added_by=user.id,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def add_from_recipe(
        self, user: User, list_id: int, data: ItemsFromRecipe
    ) -> tuple[list[Item], int]:
        """Add a recipe's ingredients to a list, in recipe order.

        Ingredients whose article is already a live item on the list are
        skipped. Returns the created items and how many were skipped.
        """
        self.access.require_edit(user.id, ResourceKind.LIST, list_id, detail=EDIT_DENIED)
        recipe: Recipe = self.access.require_read(user.id, ResourceKind.RECIPE, data.recipe_id)

        on_list = {
            article_id
            for (article_id,) in self.db.query(Item.article_id).filter(
                Item.list_id == list_id,
                Item.article_id.isnot(None),
                Item.not_deleted(),
            )
        }
        items, skipped = self.build_recipe_items(
            user,
            recipe,
            data.ingredient_selections,
            servings=data.servings,
            skip_article_ids=on_list,
            start_order=self._next_sort_order(list_id),
        )
        for item in items:
            item.list_id = list_id
        self.db.add_all(items)
        self.db.commit()
        for item in items:
            self.db.refresh(item)

        logger.info(
            f"User {user.id} added {len(items)} items from recipe {recipe.id} to list {list_id} "
            f"({skipped} already there)"
        )
        return items, skipped

    def build_recipe_items(
        self,
        user: User,
        recipe: Recipe,
        selections: dict[int, IngredientSelection],
        servings: int | None = None,
        skip_article_ids: set[int] | None = None,
        start_order: int = 0,
    ) -> tuple[list[Item], int]:
        """Turn recipe ingredients into unsaved items.

        Quantities scale by ``servings / recipe.servings``. The article,
        quantity and unit of a selection win over the ones stored on the
        ingredient. Items without an article are named after the product.
        """
        seen = set(skip_article_ids or ())
        multiplier = (servings or recipe.servings or 1) / (recipe.servings or 1)

        items: list[Item] = []
        skipped = 0
        for ingredient in sorted(recipe.ingredients, key=lambda i: (i.sort_order, i.id)):
            selection = selections.get(ingredient.id) or IngredientSelection()
            article_id = selection.article_id or ingredient.article_id
            if article_id is not None and article_id in seen:
                skipped += 1
                continue

            name = ingredient.product.name
            if article_id is not None:
                article: Article = self.access.require_read(
                    user.id, ResourceKind.ARTICLE, article_id
                )
                if article.product_id != ingredient.product_id:
                    raise InvalidInputError(
                        f"Article {article.name} does not belong to product "
                        f"{ingredient.product.name}"
                    )
                name = article.name
                seen.add(article_id)

            if selection.unit_id is not None:
                unit_id = self._validate_unit(selection.unit_id)
            else:
                unit_id = ingredient.unit_id or normalize_unit(ingredient.unit)

            items.append(
                Item(
                    name=name,
                    quantity=(selection.quantity or ingredient.quantity) * multiplier,
                    unit_id=unit_id,
                    notes=ingredient.notes,
                    article_id=article_id,
                    sort_order=start_order + len(items),
                    checked=False,
                    added_by=user.id,
                )
            )
        return items, skipped

    def add_from_store(self, user: User, list_id: int, data: ItemFromStore) -> Item:
        """Add an article to buy at a given store."""
        self.access.require_edit(user.id, ResourceKind.LIST, list_id, detail=EDIT_DENIED)
        article: Article = self.access.require_read(user.id, ResourceKind.ARTICLE, data.article_id)
        store: Store = self.access.require_read(user.id, ResourceKind.STORE, data.store_id)

        availability = (
            self.db.query(ArticleStore)
            .filter(ArticleStore.article_id == article.id, ArticleStore.store_id == store.id)
            .first()
        )
        if availability is None:
            raise InvalidInputError(f"{article.name} is not sold at {store.name}")
        if not availability.available:
            raise InvalidInputError(f"{article.name} is currently unavailable at {store.name}")

        already_listed = (
            self.db.query(Item.id)
            .filter(Item.list_id == list_id, Item.article_id == article.id, Item.not_deleted())
            .first()
        )
        if already_listed:
            raise InvalidInputError(f"{article.name} is already on this list")

        item = Item(
            list_id=list_id,
            name=article.name,
            quantity=data.quantity,
            unit_id=self._resolve_unit(data.unit_id, data.unit),
            notes=data.notes,
            article_id=article.id,
            store_id=store.id,
            sort_order=self._next_sort_order(list_id),
            checked=False,
            added_by=user.id,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update_item(self, user: User, item_id: int, data: ItemUpdate) -> Item:
        """Update an item's descriptive fields."""
        item = self._get_editable_item(user, item_id)

        if data.name is not None:
            item.name = data.name.strip()
        if data.quantity is not None:
            item.quantity = data.quantity
        if data.unit_id is not None:
            item.unit_id = self._validate_unit(data.unit_id)
        if data.notes is not None:
            item.notes = data.notes
        if data.sort_order is not None:
            item.sort_order = data.sort_order

        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, user: User, item_id: int) -> None:
        """Soft delete an item."""
        item = self._get_editable_item(user, item_id)
        item.soft_delete()
        self.db.commit()

    def check_item(self, user: User, item_id: int) -> Item:
        """Mark an item as checked. Purchase history is left as is."""
        item = self._get_editable_item(user, item_id)

        item.checked = True
        item.checked_at = datetime.now(UTC)
        item.checked_by = user.id

        self.db.commit()
        self.db.refresh(item)
        return item

    def uncheck_item(self, user: User, item_id: int) -> Item:
        """Return an item to pending. Purchase history is left as is."""
        item = self._get_editable_item(user, item_id)

        item.checked = False
        item.checked_at = None
        item.checked_by = None

        self.db.commit()
        self.db.refresh(item)
        return item

    def record_item_purchase(self, user: User, item_id: int, data: ItemPurchaseRecord) -> Item:
        """Store what was actually bought for an item."""
        item = self._get_editable_item(user, item_id)

        if data.purchased_quantity is not None:
            item.purchased_quantity = data.purchased_quantity
        if data.price is not None:
            item.price = data.price
        item.purchased_at = data.purchased_at or datetime.now(UTC)

        self.db.commit()
        self.db.refresh(item)
        return item

    def reset_checked(self, user: User, list_id: int) -> int:
        """Uncheck every checked item of a list in one UPDATE statement.

        The "checked" predicate is evaluated by the database at the moment
        the UPDATE runs, so all matching rows flip together or none do.
        ``purchased_quantity``, ``price`` and ``purchased_at`` are kept.
        Returns the number of items reset.
        """
        self.access.require_edit(user.id, ResourceKind.LIST, list_id, detail=EDIT_DENIED)

        reset_count = (
            self.db.query(Item)
            .filter(
                Item.list_id == list_id,
                Item.checked.is_(True),
                Item.not_deleted(),
            )
            .update(
                {Item.checked: False, Item.checked_at: None, Item.checked_by: None},
                synchronize_session=False,
            )
        )
        self.db.commit()

        logger.info(f"User {user.id} reset {reset_count} checked items on list {list_id}")
        return reset_count

    def _get_editable_item(self, user: User, item_id: int) -> Item:
        item = self.db.query(Item).filter(Item.id == item_id, Item.not_deleted()).first()
        if not item:
            raise NotFoundError("Item not found")

        try:
            self.access.require_edit(user.id, ResourceKind.LIST, item.list_id, detail=EDIT_DENIED)
        except NotFoundError:
            raise NotFoundError("Item not found") from None
        return item

    def _validate_unit(self, unit_id: str) -> str:
        if self.db.get(Unit, unit_id) is None:
            raise InvalidInputError(f"Unknown unit: {unit_id}")
        return unit_id

    def _resolve_unit(self, unit_id: str | None, free_text: str | None) -> str:
        if unit_id is not None:
            return self._validate_unit(unit_id)
        return normalize_unit(free_text)

    def _next_sort_order(self, list_id: int) -> int:
        return (
            self.db.query(func.coalesce(func.max(Item.sort_order) + 1, 0))
            .filter(Item.list_id == list_id, Item.not_deleted())
            .scalar()
        )
