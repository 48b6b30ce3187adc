"""Enums for model fields."""

from enum import Enum, StrEnum


class ListStatus(str, Enum):
    """Lifecycle status of a shopping list."""

    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"
    PERIODIC = "periodic"


class StoreType(str, Enum):
    """Kinds of store."""

    SUPERMARKET = "supermarket"
    SPECIALTY = "specialty"
    ONLINE = "online"
    OTHER = "other"


class ResourceKind(StrEnum):
    """Resource types covered by the access rules."""

    LIST = "list"
    RECIPE = "recipe"
    STORE = "store"
    ARTICLE = "article"
    PRODUCT = "product"
