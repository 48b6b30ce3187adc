"""SQLAlchemy models."""

from mealmoti.models.catalog import Article, ArticleStore, Product, Store, StoreShare
from mealmoti.models.item import Item
from mealmoti.models.list import ListShare, ShoppingList
from mealmoti.models.purchase import Purchase, PurchaseItem
from mealmoti.models.recipe import Recipe, RecipeIngredient
from mealmoti.models.unit import Unit
from mealmoti.models.user import User

__all__ = [
    "User",
    "Unit",
    "ShoppingList",
    "ListShare",
    "Item",
    "Recipe",
    "RecipeIngredient",
    "Product",
    "Article",
    "Store",
    "StoreShare",
    "ArticleStore",
    "Purchase",
    "PurchaseItem",
]
