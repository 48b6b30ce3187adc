"""Purchase recording tests."""

from mealmoti.models import Item


def add_checked_item(client, headers, list_id, name, quantity=None, price=None, bought=None):
    payload = {"name": name}
    if quantity is not None:
        payload["quantity"] = quantity
    item = client.post(f"/api/v1/lists/{list_id}/items", headers=headers, json=payload).json()
    client.post(f"/api/v1/items/{item['id']}/check", headers=headers)
    if price is not None or bought is not None:
        record = {}
        if price is not None:
            record["price"] = price
        if bought is not None:
            record["purchased_quantity"] = bought
        client.post(f"/api/v1/items/{item['id']}/purchase", headers=headers, json=record)
    return item


def test_record_purchase(client, db, auth_headers, shopping_list):
    """Checked items are snapshotted with subtotals and a total."""
    list_id = shopping_list["id"]
    milk = add_checked_item(client, auth_headers, list_id, "Milk", quantity=2, price=1.5)
    add_checked_item(client, auth_headers, list_id, "Apples", quantity=1, price=0.5, bought=3)
    client.post(f"/api/v1/lists/{list_id}/items", headers=auth_headers, json={"name": "Pending"})

    response = client.post(f"/api/v1/lists/{list_id}/purchases", headers=auth_headers, json={})
    assert response.status_code == 201
    purchase = response.json()

    assert purchase["recorded_by"] == auth_headers.user_id
    lines = {line["name"]: line for line in purchase["items"]}
    assert set(lines) == {"Milk", "Apples"}
    assert lines["Milk"]["subtotal"] == 3.0
    assert lines["Apples"]["purchased_quantity"] == 3
    assert lines["Apples"]["subtotal"] == 1.5
    assert purchase["total_paid"] == 4.5

    # Items stay checked; their purchase date is stamped
    stored = db.get(Item, milk["id"])
    assert stored.checked is True
    assert stored.purchased_at is not None


def test_record_purchase_without_prices(client, auth_headers, shopping_list):
    """Unpriced purchases have no total."""
    add_checked_item(client, auth_headers, shopping_list["id"], "Bread")

    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/purchases", headers=auth_headers, json={}
    )
    assert response.status_code == 201
    purchase = response.json()
    assert purchase["total_paid"] is None
    assert purchase["items"][0]["price"] == 0
    assert purchase["items"][0]["subtotal"] == 0


def test_record_purchase_requires_checked_items(client, auth_headers, shopping_list):
    """Nothing checked means nothing to record."""
    response = client.post(
        f"/api/v1/lists/{shopping_list['id']}/purchases", headers=auth_headers, json={}
    )
    assert response.status_code == 400


def test_list_purchases(client, auth_headers, other_headers, shopping_list):
    """Readers of the list can see its purchase history."""
    list_id = shopping_list["id"]
    add_checked_item(client, auth_headers, list_id, "Cheese", quantity=1, price=4.0)
    client.post(
        f"/api/v1/lists/{list_id}/purchases",
        headers=auth_headers,
        json={"notes": "Saturday market"},
    )
    client.post(
        f"/api/v1/lists/{list_id}/share",
        headers=auth_headers,
        json={"email": other_headers.email, "can_edit": False},
    )

    response = client.get(f"/api/v1/lists/{list_id}/purchases", headers=other_headers)
    assert response.status_code == 200
    purchases = response.json()
    assert len(purchases) == 1
    assert purchases[0]["notes"] == "Saturday market"

    response = client.post(f"/api/v1/lists/{list_id}/purchases", headers=other_headers, json={})
    assert response.status_code == 403


def record(client, headers, list_id):
    response = client.post(f"/api/v1/lists/{list_id}/purchases", headers=headers, json={})
    assert response.status_code == 201
    return response.json()


def test_get_purchase(client, auth_headers, stranger_headers, shopping_list):
    """A purchase is visible to readers of its list only."""
    add_checked_item(client, auth_headers, shopping_list["id"], "Rice", quantity=1, price=2.0)
    purchase = record(client, auth_headers, shopping_list["id"])

    response = client.get(f"/api/v1/purchases/{purchase['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["items"][0]["name"] == "Rice"

    response = client.get(f"/api/v1/purchases/{purchase['id']}", headers=stranger_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Purchase not found"


def test_update_purchase_recomputes_totals(client, auth_headers, shopping_list):
    """Corrected lines get a new subtotal and the total is summed again."""
    list_id = shopping_list["id"]
    add_checked_item(client, auth_headers, list_id, "Milk", quantity=2, price=1.5)
    add_checked_item(client, auth_headers, list_id, "Bread", quantity=1)
    purchase = record(client, auth_headers, list_id)
    assert purchase["total_paid"] == 3.0
    lines = {line["name"]: line for line in purchase["items"]}

    response = client.put(
        f"/api/v1/purchases/{purchase['id']}",
        headers=auth_headers,
        json={
            "notes": "Receipt checked",
            "items": [
                {"id": lines["Milk"]["id"], "purchased_quantity": 3},
                {"id": lines["Bread"]["id"], "price": 2.25},
            ],
        },
    )
    assert response.status_code == 200
    updated = response.json()
    lines = {line["name"]: line for line in updated["items"]}
    assert lines["Milk"]["subtotal"] == 4.5
    assert lines["Bread"]["subtotal"] == 2.25
    assert updated["total_paid"] == 6.75
    assert updated["notes"] == "Receipt checked"


def test_update_purchase_rejects_foreign_lines(client, auth_headers, shopping_list):
    """Lines of another purchase cannot be edited through this one."""
    list_id = shopping_list["id"]
    add_checked_item(client, auth_headers, list_id, "Milk", quantity=1, price=1.0)
    first = record(client, auth_headers, list_id)
    second = record(client, auth_headers, list_id)

    response = client.put(
        f"/api/v1/purchases/{second['id']}",
        headers=auth_headers,
        json={"items": [{"id": first["items"][0]["id"], "price": 9.0}]},
    )
    assert response.status_code == 400


def test_update_purchase_requires_edit(client, auth_headers, other_headers, shopping_list):
    """View-only grantees cannot correct purchases."""
    list_id = shopping_list["id"]
    add_checked_item(client, auth_headers, list_id, "Milk", quantity=1, price=1.0)
    purchase = record(client, auth_headers, list_id)
    client.post(
        f"/api/v1/lists/{list_id}/share",
        headers=auth_headers,
        json={"email": other_headers.email, "can_edit": False},
    )

    response = client.put(
        f"/api/v1/purchases/{purchase['id']}", headers=other_headers, json={"notes": "Mine"}
    )
    assert response.status_code == 403
