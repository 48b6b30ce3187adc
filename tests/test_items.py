"""Shopping list item lifecycle tests."""

from mealmoti.models import Item


def add_item(client, headers, list_id, **fields):
    payload = {"name": "Milk", **fields}
    response = client.post(f"/api/v1/lists/{list_id}/items", headers=headers, json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_item(client, auth_headers, shopping_list):
    """New items start pending with no purchase history."""
    item = add_item(client, auth_headers, shopping_list["id"], quantity=2, unit="2 kg")
    assert item["checked"] is False
    assert item["checked_at"] is None
    assert item["purchased_quantity"] is None
    assert item["price"] is None
    assert item["unit_id"] == "unit-kg"
    assert item["added_by"] == auth_headers.user_id


def test_create_item_explicit_unit(client, auth_headers, shopping_list):
    """An explicit unit id must exist in the catalog."""
    item = add_item(client, auth_headers, shopping_list["id"], unit_id="unit-ml")
    assert item["unit_id"] == "unit-ml"

    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/items",
        headers=auth_headers,
        json={"name": "Water", "unit_id": "unit-gallon"},
    )
    assert response.status_code == 400


def test_create_item_defaults_to_pieces(client, auth_headers, shopping_list):
    """Items without a unit are counted in pieces."""
    item = add_item(client, auth_headers, shopping_list["id"])
    assert item["unit_id"] == "unit-un"


def test_check_and_uncheck(client, auth_headers, shopping_list):
    """Checking stamps who and when; unchecking clears it."""
    item = add_item(client, auth_headers, shopping_list["id"])

    response = client.post(f"/api/v1/items/{item['id']}/check", headers=auth_headers)
    assert response.status_code == 200
    checked = response.json()
    assert checked["checked"] is True
    assert checked["checked_by"] == auth_headers.user_id
    assert checked["checked_at"] is not None

    response = client.post(f"/api/v1/items/{item['id']}/uncheck", headers=auth_headers)
    assert response.status_code == 200
    unchecked = response.json()
    assert unchecked["checked"] is False
    assert unchecked["checked_by"] is None
    assert unchecked["checked_at"] is None


def test_uncheck_keeps_purchase_history(client, auth_headers, shopping_list):
    """Purchase history survives unchecking."""
    item = add_item(client, auth_headers, shopping_list["id"], quantity=1)
    client.post(f"/api/v1/items/{item['id']}/check", headers=auth_headers)
    client.post(
        f"/api/v1/items/{item['id']}/purchase",
        headers=auth_headers,
        json={"purchased_quantity": 2, "price": 1.25},
    )

    response = client.post(f"/api/v1/items/{item['id']}/uncheck", headers=auth_headers)
    data = response.json()
    assert data["purchased_quantity"] == 2
    assert data["price"] == 1.25
    assert data["purchased_at"] is not None


def test_update_item(client, auth_headers, shopping_list):
    """Items can be renamed and re-quantified."""
    item = add_item(client, auth_headers, shopping_list["id"])

    response = client.put(
        f"/api/v1/items/{item['id']}",
        headers=auth_headers,
        json={"name": "Oat milk", "quantity": 3},
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Oat milk"
    assert response.json()["quantity"] == 3


def test_delete_item(client, auth_headers, shopping_list):
    """Deleted items disappear from the list."""
    item = add_item(client, auth_headers, shopping_list["id"])

    response = client.delete(f"/api/v1/items/{item['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = client.get(f"/api/v1/lists/{shopping_list['id']}/items", headers=auth_headers)
    assert response.json() == []


def test_list_items_exclude_checked(client, auth_headers, shopping_list):
    """Checked items can be filtered out."""
    list_id = shopping_list["id"]
    milk = add_item(client, auth_headers, list_id, name="Milk")
    add_item(client, auth_headers, list_id, name="Eggs")
    client.post(f"/api/v1/items/{milk['id']}/check", headers=auth_headers)

    all_items = client.get(f"/api/v1/lists/{list_id}/items", headers=auth_headers).json()
    assert len(all_items) == 2

    pending = client.get(
        f"/api/v1/lists/{list_id}/items?include_checked=false", headers=auth_headers
    ).json()
    assert [item["name"] for item in pending] == ["Eggs"]


def test_reset_checked_items(client, db, auth_headers, shopping_list):
    """Reset unchecks every checked item and keeps purchase history."""
    list_id = shopping_list["id"]
    milk = add_item(client, auth_headers, list_id, name="Milk")
    eggs = add_item(client, auth_headers, list_id, name="Eggs")
    add_item(client, auth_headers, list_id, name="Bread")
    for item in (milk, eggs):
        client.post(f"/api/v1/items/{item['id']}/check", headers=auth_headers)
    client.post(
        f"/api/v1/items/{milk['id']}/purchase",
        headers=auth_headers,
        json={"purchased_quantity": 1, "price": 0.99},
    )

    response = client.post(f"/api/v1/lists/{list_id}/items/reset", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"reset_count": 2}

    items = db.query(Item).filter(Item.list_id == list_id).all()
    assert all(not item.checked for item in items)
    assert all(item.checked_by is None and item.checked_at is None for item in items)

    reset_milk = db.get(Item, milk["id"])
    assert reset_milk.price == 0.99
    assert reset_milk.purchased_quantity == 1
    assert reset_milk.purchased_at is not None


def test_reset_with_nothing_checked(client, auth_headers, shopping_list):
    """Resetting a list without checked items is a no-op."""
    add_item(client, auth_headers, shopping_list["id"])

    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/items/reset", headers=auth_headers
    )
    assert response.json() == {"reset_count": 0}


def test_reset_is_scoped_to_list(client, db, auth_headers, shopping_list):
    """Only the target list's items are reset."""
    other_list = client.post("/api/v1/lists", headers=auth_headers, json={"name": "Other"}).json()
    here = add_item(client, auth_headers, shopping_list["id"])
    there = add_item(client, auth_headers, other_list["id"])
    for item in (here, there):
        client.post(f"/api/v1/items/{item['id']}/check", headers=auth_headers)

    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/items/reset", headers=auth_headers
    )
    assert response.json() == {"reset_count": 1}

    assert db.get(Item, there["id"]).checked is True


def test_reset_skips_deleted_items(client, db, auth_headers, shopping_list):
    """Soft-deleted items are left alone."""
    item = add_item(client, auth_headers, shopping_list["id"])
    client.post(f"/api/v1/items/{item['id']}/check", headers=auth_headers)
    client.delete(f"/api/v1/items/{item['id']}", headers=auth_headers)

    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/items/reset", headers=auth_headers
    )
    assert response.json() == {"reset_count": 0}


def test_viewer_cannot_modify_items(client, auth_headers, other_headers, shopping_list):
    """Read-only grantees can see items but not change them."""
    list_id = shopping_list["id"]
    item = add_item(client, auth_headers, list_id)
    client.post(
        f"/api/v1/lists/{list_id}/share",
        headers=auth_headers,
        json={"email": other_headers.email, "can_edit": False},
    )

    response = client.get(f"/api/v1/lists/{list_id}/items", headers=other_headers)
    assert response.status_code == 200

    for path in (f"/api/v1/items/{item['id']}/check", f"/api/v1/lists/{list_id}/items/reset"):
        response = client.post(path, headers=other_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "You don't have permission to edit this list"


def test_stranger_cannot_touch_items(client, auth_headers, stranger_headers, shopping_list):
    """Items on lists the user cannot read look like missing items."""
    item = add_item(client, auth_headers, shopping_list["id"])

    response = client.post(f"/api/v1/items/{item['id']}/check", headers=stranger_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Item not found"


def stocked_article(client, headers, product, price=2.5, available=True):
    article = client.post(
        "/api/v1/articles",
        headers=headers,
        json={"product_id": product["id"], "name": "Vine tomato"},
    ).json()
    store = client.post("/api/v1/stores", headers=headers, json={"name": "Corner shop"}).json()
    client.put(
        f"/api/v1/articles/{article['id']}/stores/{store['id']}",
        headers=headers,
        json={"price": price, "available": available},
    )
    return article, store


def test_add_item_from_store(client, auth_headers, shopping_list, product):
    """An article sold at a store becomes an item tied to that store."""
    article, store = stocked_article(client, auth_headers, product)
    path = f"/api/v1/lists/{shopping_list['id']}/items/from-store"
    payload = {"article_id": article["id"], "store_id": store["id"], "quantity": 2}

    response = client.post(path, headers=auth_headers, json=payload)
    assert response.status_code == 201
    item = response.json()
    assert item["name"] == "Vine tomato"
    assert item["article_id"] == article["id"]
    assert item["store_id"] == store["id"]
    assert item["quantity"] == 2
    assert item["unit_id"] == "unit-un"

    response = client.post(path, headers=auth_headers, json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Vine tomato is already on this list"


def test_add_item_from_store_requires_availability(client, auth_headers, shopping_list, product):
    """The article must be listed and available at the store."""
    article, store = stocked_article(client, auth_headers, product, available=False)
    other_store = client.post("/api/v1/stores", headers=auth_headers, json={"name": "Mall"}).json()
    path = f"/api/v1/lists/{shopping_list['id']}/items/from-store"

    for store_id in (store["id"], other_store["id"]):
        response = client.post(
            path,
            headers=auth_headers,
            json={"article_id": article["id"], "store_id": store_id, "quantity": 1},
        )
        assert response.status_code == 400


def test_add_item_from_hidden_store(
    client, auth_headers, other_headers, shopping_list, product
):
    """Stores the user cannot see are not found."""
    article = client.post(
        "/api/v1/articles",
        headers=auth_headers,
        json={"product_id": product["id"], "name": "Vine tomato", "is_general": True},
    ).json()
    private_store = client.post(
        "/api/v1/stores", headers=other_headers, json={"name": "Their shop"}
    ).json()

    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/items/from-store",
        headers=auth_headers,
        json={"article_id": article["id"], "store_id": private_store["id"], "quantity": 1},
    )
    assert response.status_code == 404
