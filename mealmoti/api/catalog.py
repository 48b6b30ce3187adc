"""Catalog API endpoints: products, articles, stores and units."""

from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mealmoti.api.dependencies import (
    Pagination,
    get_access_resolver,
    get_current_user,
    get_sharing_service,
)
from mealmoti.database import get_db, upsert_statement
from mealmoti.models.catalog import Article, ArticleStore, Product, Store
from mealmoti.models.enums import ResourceKind
from mealmoti.models.unit import Unit
from mealmoti.models.user import User
from mealmoti.schemas.catalog import (
    ArticleCreate,
    ArticleResponse,
    ArticleStoreResponse,
    ArticleStoreUpsert,
    ArticleUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StoreCreate,
    StoreResponse,
    StoreUpdate,
    UnitResponse,
)
from mealmoti.schemas.list import ShareCreate, ShareResponse
from mealmoti.services.access import AccessResolver, get_policy
from mealmoti.services.sharing import SharingService

router = APIRouter(prefix="/api/v1", tags=["catalog"])


def list_readable(
    db: Session,
    kind: ResourceKind,
    user_id: int,
    search: str | None,
    pagination: Pagination,
) -> list[Any]:
    """Page through the catalog entries of one kind the user can read."""
    policy = get_policy(kind)
    model = policy.model
    query = db.query(model).filter(policy.readable_filter(user_id))
    if search:
        query = query.filter(model.name.ilike(f"%{search.strip()}%"))
    return (
        query.order_by(model.name, model.id)
        .limit(pagination.limit)
        .offset(pagination.offset)
        .all()
    )


def apply_update(resource: Any, data) -> None:
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(resource, field, getattr(value, "value", value))


# --- Units ---


@router.get("/units", response_model=list[UnitResponse], tags=["units"])
async def list_units(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List the canonical units."""
    return db.query(Unit).order_by(Unit.id).all()


# --- Products ---


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
    search: str | None = Query(default=None, max_length=255),
):
    """List general products and the user's own."""
    return list_readable(db, ResourceKind.PRODUCT, current_user.id, search, pagination)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a product."""
    product = Product(
        name=product_data.name.strip(),
        description=product_data.description,
        is_general=product_data.is_general,
        created_by_id=current_user.id,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@router.get("/products/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Get a product."""
    return access.require_read(current_user.id, ResourceKind.PRODUCT, product_id)


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_data: ProductUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Update a product (creator only)."""
    product = access.require_edit(current_user.id, ResourceKind.PRODUCT, product_id)
    apply_update(product, product_data)
    db.commit()
    db.refresh(product)
    return product


@router.get("/products/{product_id}/articles", response_model=list[ArticleResponse])
async def list_product_articles(
    product_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """List the articles of a product the user can see."""
    access.require_read(current_user.id, ResourceKind.PRODUCT, product_id)
    return (
        db.query(Article)
        .filter(
            Article.product_id == product_id,
            get_policy(ResourceKind.ARTICLE).readable_filter(current_user.id),
        )
        .order_by(Article.name, Article.id)
        .all()
    )


# --- Articles ---


@router.get("/articles", response_model=list[ArticleResponse])
async def list_articles(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
    search: str | None = Query(default=None, max_length=255),
):
    """List general articles and the user's own."""
    return list_readable(db, ResourceKind.ARTICLE, current_user.id, search, pagination)


@router.post("/articles", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    article_data: ArticleCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Create an article for a product the user can see."""
    access.require_read(current_user.id, ResourceKind.PRODUCT, article_data.product_id)

    article = Article(
        product_id=article_data.product_id,
        name=article_data.name.strip(),
        brand=article_data.brand,
        variant=article_data.variant,
        suggested_price=article_data.suggested_price,
        is_general=article_data.is_general,
        created_by_id=current_user.id,
    )
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


@router.get("/articles/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Get an article."""
    return access.require_read(current_user.id, ResourceKind.ARTICLE, article_id)


@router.put("/articles/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: int,
    article_data: ArticleUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Update an article (creator only)."""
    article = access.require_edit(current_user.id, ResourceKind.ARTICLE, article_id)
    apply_update(article, article_data)
    db.commit()
    db.refresh(article)
    return article


@router.get("/articles/{article_id}/stores", response_model=list[ArticleStoreResponse])
async def list_article_stores(
    article_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Where an article can be bought, limited to stores the user can see."""
    access.require_read(current_user.id, ResourceKind.ARTICLE, article_id)
    return (
        db.query(ArticleStore)
        .join(Store, ArticleStore.store_id == Store.id)
        .filter(
            ArticleStore.article_id == article_id,
            get_policy(ResourceKind.STORE).readable_filter(current_user.id),
        )
        .order_by(ArticleStore.price.is_(None), ArticleStore.price, ArticleStore.id)
        .all()
    )


@router.put("/articles/{article_id}/stores/{store_id}", response_model=ArticleStoreResponse)
async def set_article_store(
    article_id: int,
    store_id: int,
    availability: ArticleStoreUpsert,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Set an article's price and availability at a store the user can edit."""
    access.require_read(current_user.id, ResourceKind.ARTICLE, article_id)
    access.require_edit(current_user.id, ResourceKind.STORE, store_id)

    checked_at = datetime.now(UTC)
    stmt = upsert_statement(
        db,
        ArticleStore,
        values={
            "article_id": article_id,
            "store_id": store_id,
            "price": availability.price,
            "available": availability.available,
            "last_checked_at": checked_at,
        },
        index_elements=["article_id", "store_id"],
        update={
            "price": availability.price,
            "available": availability.available,
            "last_checked_at": checked_at,
        },
    )
    db.execute(stmt)
    db.commit()

    return (
        db.query(ArticleStore)
        .filter(ArticleStore.article_id == article_id, ArticleStore.store_id == store_id)
        .one()
    )


# --- Stores ---


@router.get("/stores", response_model=list[StoreResponse])
async def list_stores(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[Pagination, Depends()],
    search: str | None = Query(default=None, max_length=255),
):
    """List general stores, the user's own and stores shared with them."""
    return list_readable(db, ResourceKind.STORE, current_user.id, search, pagination)


@router.post("/stores", response_model=StoreResponse, status_code=status.HTTP_201_CREATED)
async def create_store(
    store_data: StoreCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a store."""
    store = Store(
        name=store_data.name.strip(),
        type=store_data.type.value,
        address=store_data.address,
        is_general=store_data.is_general,
        created_by_id=current_user.id,
    )
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


@router.get("/stores/{store_id}", response_model=StoreResponse)
async def get_store(
    store_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Get a store."""
    return access.require_read(current_user.id, ResourceKind.STORE, store_id)


@router.put("/stores/{store_id}", response_model=StoreResponse)
async def update_store(
    store_id: int,
    store_data: StoreUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    access: Annotated[AccessResolver, Depends(get_access_resolver)],
):
    """Update a store (owner or editor)."""
    store = access.require_edit(current_user.id, ResourceKind.STORE, store_id)
    apply_update(store, store_data)
    db.commit()
    db.refresh(store)
    return store


@router.get("/stores/{store_id}/shares", response_model=list[ShareResponse])
async def get_store_shares(
    store_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Get the users a store is shared with."""
    return sharing.list_shares(current_user.id, ResourceKind.STORE, store_id)


@router.post(
    "/stores/{store_id}/share", response_model=ShareResponse, status_code=status.HTTP_201_CREATED
)
async def share_store(
    store_id: int,
    share_data: ShareCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Share a private store with another user."""
    return sharing.share_resource(
        current_user.id, ResourceKind.STORE, store_id, share_data.email, share_data.can_edit
    )


@router.delete("/stores/{store_id}/share/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def unshare_store(
    store_id: int,
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    sharing: Annotated[SharingService, Depends(get_sharing_service)],
):
    """Remove a user's access to a store (owner only)."""
    sharing.revoke_share(current_user.id, ResourceKind.STORE, store_id, user_id)
