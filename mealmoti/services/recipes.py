"""Recipe service: recipe CRUD and forking general recipes into private copies."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from mealmoti.models.catalog import Article
from mealmoti.models.enums import ResourceKind
from mealmoti.models.list import ShoppingList
from mealmoti.models.recipe import Recipe, RecipeIngredient
from mealmoti.models.unit import Unit
from mealmoti.schemas.recipe import (
    RecipeCreate,
    RecipeIngredientCreate,
    RecipeIngredientUpdate,
    RecipeUpdate,
)
from mealmoti.services.access import AccessResolver, get_policy
from mealmoti.services.errors import (
    AlreadyExistsError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from mealmoti.services.units import normalize_unit

logger = logging.getLogger(__name__)

# Fields copied verbatim when forking a recipe
FORKED_RECIPE_FIELDS = ("name", "description", "instructions", "servings", "prep_time", "cook_time")

# Columns that cannot be cleared through an update
NON_NULLABLE_RECIPE_FIELDS = ("name", "is_general")
NON_NULLABLE_INGREDIENT_FIELDS = ("quantity", "is_optional", "sort_order")


class RecipeService:
    """Service for recipe-related operations."""

    def __init__(self, db: Session):
        self.db = db
        self.access = AccessResolver(db)

    def get_recipe(self, user_id: int, recipe_id: int) -> Recipe:
        """Get a recipe the user owns or that is general."""
        return self.access.require_read(user_id, ResourceKind.RECIPE, recipe_id)

    def list_recipes(
        self,
        user_id: int,
        search: str | None = None,
        general_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Recipe], int]:
        """List visible recipes, most recently updated first."""
        query = self.db.query(Recipe)
        if general_only:
            query = query.filter(Recipe.is_general.is_(True))
        else:
            query = query.filter(get_policy(ResourceKind.RECIPE).readable_filter(user_id))
        if search:
            query = query.filter(Recipe.name.ilike(f"%{search.strip()}%"))

        total = query.count()
        recipes = (
            query.options(selectinload(Recipe.ingredients))
            .order_by(Recipe.updated_at.desc(), Recipe.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return recipes, total

    def create_recipe(self, user_id: int, data: RecipeCreate) -> Recipe:
        """Create a recipe with its ingredients."""
        recipe = Recipe(
            created_by_id=user_id,
            is_general=data.is_general,
            name=data.name.strip(),
            description=data.description,
            instructions=data.instructions,
            servings=data.servings,
            prep_time=data.prep_time,
            cook_time=data.cook_time,
        )
        for index, ing_data in enumerate(data.ingredients):
            recipe.ingredients.append(self._build_ingredient(user_id, ing_data, index))

        self.db.add(recipe)
        self.db.commit()
        self.db.refresh(recipe)
        return recipe

    def update_recipe(self, user_id: int, recipe_id: int, data: RecipeUpdate) -> Recipe:
        """Update recipe metadata (owner only)."""
        recipe = self.access.require_owner(
            user_id,
            ResourceKind.RECIPE,
            recipe_id,
            detail="Only the creator can update this recipe",
        )
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in NON_NULLABLE_RECIPE_FIELDS:
                continue
            setattr(recipe, field, value)

        self.db.commit()
        self.db.refresh(recipe)
        return recipe

    def delete_recipe(self, user_id: int, recipe_id: int) -> None:
        """Delete a recipe (owner only). Forks keep existing without lineage."""
        recipe = self.access.require_owner(
            user_id,
            ResourceKind.RECIPE,
            recipe_id,
            detail="Only the creator can delete this recipe",
        )
        self.db.query(Recipe).filter(Recipe.original_recipe_id == recipe.id).update(
            {Recipe.original_recipe_id: None}, synchronize_session=False
        )
        self.db.delete(recipe)
        self.db.commit()

    def add_ingredient(
        self, user_id: int, recipe_id: int, data: RecipeIngredientCreate
    ) -> RecipeIngredient:
        """Append an ingredient to a recipe (owner only)."""
        recipe = self.access.require_owner(
            user_id,
            ResourceKind.RECIPE,
            recipe_id,
            detail="Only the creator can change this recipe",
        )
        next_order = (
            self.db.query(func.coalesce(func.max(RecipeIngredient.sort_order) + 1, 0))
            .filter(RecipeIngredient.recipe_id == recipe.id)
            .scalar()
        )
        ingredient = self._build_ingredient(user_id, data, next_order)
        ingredient.recipe_id = recipe.id
        self.db.add(ingredient)
        self.db.commit()
        self.db.refresh(ingredient)
        return ingredient

    def update_ingredient(
        self, user_id: int, recipe_id: int, ingredient_id: int, data: RecipeIngredientUpdate
    ) -> RecipeIngredient:
        """Change an ingredient (owner only).

        Switching the product clears an article that belonged to the old one.
        """
        recipe = self.access.require_owner(
            user_id,
            ResourceKind.RECIPE,
            recipe_id,
            detail="Only the creator can change this recipe",
        )
        ingredient = self._get_ingredient(recipe.id, ingredient_id)
        updates = data.model_dump(exclude_unset=True)

        product_id = updates.pop("product_id", None)
        if product_id is not None and product_id != ingredient.product_id:
            self.access.require_read(user_id, ResourceKind.PRODUCT, product_id)
            ingredient.product_id = product_id
            ingredient.article_id = None

        unit_id = updates.pop("unit_id", None)
        unit = updates.pop("unit", None)
        if unit_id is not None:
            ingredient.unit_id = self._validate_unit(unit_id)
        elif unit is not None:
            ingredient.unit_id = normalize_unit(unit)

        for field, value in updates.items():
            if value is None and field in NON_NULLABLE_INGREDIENT_FIELDS:
                continue
            setattr(ingredient, field, value)

        self.db.commit()
        self.db.refresh(ingredient)
        return ingredient

    def delete_ingredient(self, user_id: int, recipe_id: int, ingredient_id: int) -> None:
        """Remove an ingredient (owner only)."""
        recipe = self.access.require_owner(
            user_id,
            ResourceKind.RECIPE,
            recipe_id,
            detail="Only the creator can change this recipe",
        )
        ingredient = self._get_ingredient(recipe.id, ingredient_id)
        self.db.delete(ingredient)
        self.db.commit()

    def select_ingredient_article(
        self, user_id: int, recipe_id: int, ingredient_id: int, article_id: int | None
    ) -> RecipeIngredient:
        """Choose (or clear) the concrete article used for an ingredient."""
        recipe = self.access.require_owner(
            user_id,
            ResourceKind.RECIPE,
            recipe_id,
            detail="Only the creator can change this recipe",
        )
        ingredient = self._get_ingredient(recipe.id, ingredient_id)

        if article_id is not None:
            article: Article = self.access.require_read(user_id, ResourceKind.ARTICLE, article_id)
            if article.product_id != ingredient.product_id:
                raise InvalidInputError(
                    f"Article {article.name} does not belong to the ingredient's product"
                )

        ingredient.article_id = article_id
        self.db.commit()
        self.db.refresh(ingredient)
        return ingredient

    def fork_recipe(self, user_id: int, recipe_id: int) -> Recipe:
        """Create a private copy of a recipe for the user.

        The copy keeps a lineage link to the original, starts private, and
        copies every ingredient in the same order without its article, which
        the new owner picks again. A user gets at most one fork per original;
        the unique (original_recipe_id, created_by_id) constraint settles
        concurrent forks and the loser gets AlreadyExistsError pointing at
        the surviving copy.
        """
        original = self.access.require_read(user_id, ResourceKind.RECIPE, recipe_id)

        existing = self._find_fork(recipe_id, user_id)
        if existing is not None:
            raise AlreadyExistsError("You already have a copy of this recipe", existing.id)

        fork = Recipe(
            created_by_id=user_id,
            is_general=False,
            original_recipe_id=original.id,
            **{field: getattr(original, field) for field in FORKED_RECIPE_FIELDS},
        )
        for ingredient in sorted(original.ingredients, key=lambda i: i.sort_order):
            fork.ingredients.append(
                RecipeIngredient(
                    product_id=ingredient.product_id,
                    quantity=ingredient.quantity,
                    unit=ingredient.unit,
                    unit_id=ingredient.unit_id,
                    is_optional=ingredient.is_optional,
                    notes=ingredient.notes,
                    sort_order=ingredient.sort_order,
                    article_id=None,
                )
            )

        self.db.add(fork)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self._find_fork(recipe_id, user_id)
            if existing is None:
                raise ConflictError("Could not copy the recipe, please retry") from None
            logger.warning(f"Concurrent fork of recipe {recipe_id} by user {user_id} resolved")
            raise AlreadyExistsError(
                "You already have a copy of this recipe", existing.id
            ) from None

        self.db.refresh(fork)
        logger.info(f"User {user_id} forked recipe {recipe_id} into recipe {fork.id}")
        return fork

    def _find_fork(self, original_id: int, user_id: int) -> Recipe | None:
        return (
            self.db.query(Recipe)
            .filter(Recipe.original_recipe_id == original_id, Recipe.created_by_id == user_id)
            .first()
        )

    def _build_ingredient(
        self, user_id: int, data: RecipeIngredientCreate, default_order: int
    ) -> RecipeIngredient:
        self.access.require_read(user_id, ResourceKind.PRODUCT, data.product_id)

        if data.article_id is not None:
            article: Article = self.access.require_read(
                user_id, ResourceKind.ARTICLE, data.article_id
            )
            if article.product_id != data.product_id:
                raise InvalidInputError(
                    f"Article {article.name} does not belong to product {data.product_id}"
                )

        if data.unit_id is not None:
            unit_id = self._validate_unit(data.unit_id)
        else:
            unit_id = normalize_unit(data.unit)

        return RecipeIngredient(
            product_id=data.product_id,
            article_id=data.article_id,
            quantity=data.quantity,
            unit_id=unit_id,
            is_optional=data.is_optional,
            notes=data.notes,
            sort_order=data.sort_order if data.sort_order is not None else default_order,
        )

    def _get_ingredient(self, recipe_id: int, ingredient_id: int) -> RecipeIngredient:
        ingredient = (
            self.db.query(RecipeIngredient)
            .filter(RecipeIngredient.id == ingredient_id, RecipeIngredient.recipe_id == recipe_id)
            .first()
        )
        if not ingredient:
            raise NotFoundError("Ingredient not found")
        return ingredient

    def _validate_unit(self, unit_id: str) -> str:
        if self.db.get(Unit, unit_id) is None:
            raise InvalidInputError(f"Unknown unit: {unit_id}")
        return unit_id
