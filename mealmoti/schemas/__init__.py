"""Pydantic schemas for API requests and responses."""

from mealmoti.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from mealmoti.schemas.item import ItemCreate, ItemPurchaseRecord, ItemResponse, ItemUpdate
from mealmoti.schemas.list import (
    ListCreate,
    ListResponse,
    ListUpdate,
    ShareCreate,
    ShareResponse,
)
from mealmoti.schemas.recipe import RecipeCreate, RecipeResponse, RecipeUpdate

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "ListCreate",
    "ListUpdate",
    "ListResponse",
    "ShareCreate",
    "ShareResponse",
    "ItemCreate",
    "ItemUpdate",
    "ItemPurchaseRecord",
    "ItemResponse",
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeResponse",
]
