"""Tests for the ownership/general/share access rule."""

import pytest

from mealmoti.models import (
    Article,
    ListShare,
    Product,
    Recipe,
    ShoppingList,
    Store,
    StoreShare,
    User,
)
from mealmoti.models.enums import ResourceKind
from mealmoti.services.access import AccessResolver, get_policy
from mealmoti.services.errors import ForbiddenError, NotFoundError


def make_user(db, email):
    user = User(email=email, password_hash="not-a-real-hash", name=email.split("@")[0])
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def users(db):
    return {
        "owner": make_user(db, "owner@example.com"),
        "editor": make_user(db, "editor@example.com"),
        "viewer": make_user(db, "viewer@example.com"),
        "stranger": make_user(db, "stranger@example.com"),
    }


@pytest.fixture
def shared_list(db, users):
    lst = ShoppingList(name="Groceries", owner_id=users["owner"].id)
    db.add(lst)
    db.commit()
    db.add_all(
        [
            ListShare(list_id=lst.id, user_id=users["editor"].id, can_edit=True),
            ListShare(list_id=lst.id, user_id=users["viewer"].id, can_edit=False),
        ]
    )
    db.commit()
    return lst


def test_list_access_by_role(db, users, shared_list):
    """Owner and editors can edit, viewers only read, strangers get nothing."""
    resolver = AccessResolver(db)

    owner = resolver.resolve(users["owner"].id, ResourceKind.LIST, shared_list.id)
    assert (owner.can_read, owner.can_edit, owner.is_owner) == (True, True, True)

    editor = resolver.resolve(users["editor"].id, ResourceKind.LIST, shared_list.id)
    assert (editor.can_read, editor.can_edit, editor.is_owner) == (True, True, False)

    viewer = resolver.resolve(users["viewer"].id, ResourceKind.LIST, shared_list.id)
    assert (viewer.can_read, viewer.can_edit) == (True, False)

    stranger = resolver.resolve(users["stranger"].id, ResourceKind.LIST, shared_list.id)
    assert (stranger.can_read, stranger.can_edit) == (False, False)


def test_missing_resource_resolves_to_no_access(db, users):
    """Unknown ids never raise from resolve."""
    access = AccessResolver(db).resolve(users["owner"].id, ResourceKind.LIST, 999999)
    assert not access.can_read
    assert not access.can_edit


def test_soft_deleted_list_is_invisible(db, users, shared_list):
    """A soft-deleted list is treated as missing."""
    shared_list.soft_delete()
    db.commit()

    access = AccessResolver(db).resolve(users["owner"].id, ResourceKind.LIST, shared_list.id)
    assert not access.can_read


def test_general_recipe_is_readable_not_editable(db, users):
    """General catalog entries are readable by everyone, editable by their owner."""
    recipe = Recipe(name="Paella", is_general=True, created_by_id=users["owner"].id)
    private = Recipe(name="Secret", is_general=False, created_by_id=users["owner"].id)
    db.add_all([recipe, private])
    db.commit()

    resolver = AccessResolver(db)
    other = resolver.resolve(users["stranger"].id, ResourceKind.RECIPE, recipe.id)
    assert (other.can_read, other.can_edit) == (True, False)

    owner = resolver.resolve(users["owner"].id, ResourceKind.RECIPE, recipe.id)
    assert owner.can_edit

    hidden = resolver.resolve(users["stranger"].id, ResourceKind.RECIPE, private.id)
    assert not hidden.can_read


def test_store_combines_general_flag_and_shares(db, users):
    """Private stores are visible to owners and grantees only."""
    store = Store(name="Corner shop", created_by_id=users["owner"].id, is_general=False)
    db.add(store)
    db.commit()
    db.add(StoreShare(store_id=store.id, user_id=users["viewer"].id, can_edit=False))
    db.commit()

    resolver = AccessResolver(db)
    assert resolver.resolve(users["viewer"].id, ResourceKind.STORE, store.id).can_read
    assert not resolver.resolve(users["viewer"].id, ResourceKind.STORE, store.id).can_edit
    assert not resolver.resolve(users["stranger"].id, ResourceKind.STORE, store.id).can_read


def test_general_product_and_article(db, users):
    """Products and articles follow the catalog rule."""
    product = Product(name="Rice", is_general=True, created_by_id=None)
    db.add(product)
    db.commit()
    article = Article(product_id=product.id, name="Brand rice", created_by_id=users["owner"].id)
    db.add(article)
    db.commit()

    resolver = AccessResolver(db)
    assert resolver.resolve(users["stranger"].id, ResourceKind.PRODUCT, product.id).can_read
    assert not resolver.resolve(users["stranger"].id, ResourceKind.ARTICLE, article.id).can_read
    assert resolver.resolve(users["owner"].id, ResourceKind.ARTICLE, article.id).can_edit


def test_edit_implies_read(db, users, shared_list):
    """No user ever has edit without read."""
    resolver = AccessResolver(db)
    for user in users.values():
        access = resolver.resolve(user.id, ResourceKind.LIST, shared_list.id)
        assert not access.can_edit or access.can_read


def test_require_helpers_disclosure(db, users, shared_list):
    """Strangers get NotFound; readers lacking rights get Forbidden."""
    resolver = AccessResolver(db)

    with pytest.raises(NotFoundError):
        resolver.require_read(users["stranger"].id, ResourceKind.LIST, shared_list.id)
    with pytest.raises(NotFoundError):
        resolver.require_edit(users["stranger"].id, ResourceKind.LIST, shared_list.id)
    with pytest.raises(ForbiddenError):
        resolver.require_edit(users["viewer"].id, ResourceKind.LIST, shared_list.id)
    with pytest.raises(ForbiddenError):
        resolver.require_owner(users["editor"].id, ResourceKind.LIST, shared_list.id)

    assert resolver.require_edit(users["editor"].id, ResourceKind.LIST, shared_list.id).id == (
        shared_list.id
    )


def test_readable_filter_matches_resolve(db, users, shared_list):
    """Listing queries use the same visibility rule as single lookups."""
    own = ShoppingList(name="Own", owner_id=users["viewer"].id)
    hidden = ShoppingList(name="Hidden", owner_id=users["stranger"].id)
    db.add_all([own, hidden])
    db.commit()

    policy = get_policy(ResourceKind.LIST)
    visible = {
        lst.id
        for lst in db.query(ShoppingList).filter(policy.readable_filter(users["viewer"].id)).all()
    }
    assert visible == {shared_list.id, own.id}
