"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from mealmoti.config import get_settings
from mealmoti.database import get_db
from mealmoti.models.user import User
from mealmoti.services.access import AccessResolver
from mealmoti.services.auth import decode_access_token
from mealmoti.services.items import ItemService
from mealmoti.services.lists import ListService
from mealmoti.services.purchases import PurchaseService
from mealmoti.services.recipes import RecipeService
from mealmoti.services.sharing import SharingService

security = HTTPBearer()
settings = get_settings()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


class Pagination:
    """Limit/offset query parameters shared by listing endpoints."""

    def __init__(
        self,
        limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
        offset: int = Query(default=0, ge=0),
    ):
        self.limit = limit
        self.offset = offset


def get_access_resolver(
    db: Annotated[Session, Depends(get_db)],
) -> AccessResolver:
    """Get access resolver bound to the request session."""
    return AccessResolver(db)


def get_sharing_service(
    db: Annotated[Session, Depends(get_db)],
) -> SharingService:
    """Get sharing service with dependencies."""
    return SharingService(db)


def get_item_service(
    db: Annotated[Session, Depends(get_db)],
) -> ItemService:
    """Get item service with dependencies."""
    return ItemService(db)


def get_list_service(
    db: Annotated[Session, Depends(get_db)],
) -> ListService:
    """Get list service with dependencies."""
    return ListService(db)


def get_recipe_service(
    db: Annotated[Session, Depends(get_db)],
) -> RecipeService:
    """Get recipe service with dependencies."""
    return RecipeService(db)


def get_purchase_service(
    db: Annotated[Session, Depends(get_db)],
) -> PurchaseService:
    """Get purchase service with dependencies."""
    return PurchaseService(db)
