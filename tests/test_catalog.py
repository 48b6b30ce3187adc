"""Product, article and store catalog tests."""


def create_store(client, headers, **fields):
    response = client.post(
        "/api/v1/stores", headers=headers, json={"name": "Supermarket", **fields}
    )
    assert response.status_code == 201
    return response.json()


def test_create_product(client, auth_headers, product):
    """Products record their creator."""
    assert product["name"] == "Tomato"
    assert product["created_by_id"] == auth_headers.user_id
    assert product["is_general"] is True


def test_private_product_hidden_from_others(client, auth_headers, other_headers):
    """Private products are only visible to their creator."""
    private = client.post(
        "/api/v1/products", headers=auth_headers, json={"name": "Home-grown basil"}
    ).json()

    response = client.get(f"/api/v1/products/{private['id']}", headers=other_headers)
    assert response.status_code == 404
    listed = client.get("/api/v1/products", headers=other_headers).json()
    assert private["id"] not in {p["id"] for p in listed}


def test_search_products(client, auth_headers, product):
    """Listings can be searched by name."""
    client.post("/api/v1/products", headers=auth_headers, json={"name": "Potato"})

    response = client.get("/api/v1/products?search=tom", headers=auth_headers)
    assert [p["name"] for p in response.json()] == ["Tomato"]


def test_product_pagination(client, auth_headers):
    """Limit and offset page through the results."""
    for name in ("Apple", "Banana", "Cherry"):
        client.post("/api/v1/products", headers=auth_headers, json={"name": name})

    response = client.get("/api/v1/products?limit=2&offset=1", headers=auth_headers)
    assert [p["name"] for p in response.json()] == ["Banana", "Cherry"]


def test_update_general_product_forbidden(client, other_headers, product):
    """Other users can read but not change a general product."""
    response = client.put(
        f"/api/v1/products/{product['id']}", headers=other_headers, json={"name": "Tomate"}
    )
    assert response.status_code == 403


def test_create_article(client, auth_headers, product):
    """Articles belong to a product."""
    response = client.post(
        "/api/v1/articles",
        headers=auth_headers,
        json={"product_id": product["id"], "name": "Canned tomato", "brand": "Acme"},
    )
    assert response.status_code == 201
    article = response.json()
    assert article["product_id"] == product["id"]

    listed = client.get(f"/api/v1/products/{product['id']}/articles", headers=auth_headers)
    assert [a["id"] for a in listed.json()] == [article["id"]]


def test_create_article_for_hidden_product(client, auth_headers, other_headers):
    """Articles cannot be attached to products the user cannot see."""
    private = client.post("/api/v1/products", headers=auth_headers, json={"name": "Secret"}).json()

    response = client.post(
        "/api/v1/articles",
        headers=other_headers,
        json={"product_id": private["id"], "name": "Copy"},
    )
    assert response.status_code == 404


def test_store_listing(client, auth_headers, other_headers):
    """General stores are listed for everyone, private ones for their owner."""
    general = create_store(client, auth_headers, name="Chain", is_general=True)
    private = create_store(client, auth_headers, name="Corner", type="specialty")
    assert private["type"] == "specialty"

    own = {s["id"] for s in client.get("/api/v1/stores", headers=auth_headers).json()}
    assert own == {general["id"], private["id"]}

    others = {s["id"] for s in client.get("/api/v1/stores", headers=other_headers).json()}
    assert others == {general["id"]}


def test_set_article_store(client, auth_headers, product):
    """Setting an article's price at a store updates one row in place."""
    article = client.post(
        "/api/v1/articles",
        headers=auth_headers,
        json={"product_id": product["id"], "name": "Vine tomato", "is_general": True},
    ).json()
    store = create_store(client, auth_headers)
    path = f"/api/v1/articles/{article['id']}/stores/{store['id']}"

    response = client.put(path, headers=auth_headers, json={"price": 2.5})
    assert response.status_code == 200
    assert response.json()["price"] == 2.5
    assert response.json()["available"] is True

    response = client.put(path, headers=auth_headers, json={"price": 2.0, "available": False})
    assert response.status_code == 200
    assert response.json()["price"] == 2.0

    listed = client.get(f"/api/v1/articles/{article['id']}/stores", headers=auth_headers).json()
    assert len(listed) == 1
    assert listed[0]["available"] is False


def test_set_article_store_requires_store_edit(client, auth_headers, other_headers, product):
    """Only users who can edit the store maintain its prices."""
    article = client.post(
        "/api/v1/articles",
        headers=auth_headers,
        json={"product_id": product["id"], "name": "Vine tomato", "is_general": True},
    ).json()
    store = create_store(client, auth_headers, is_general=True)

    response = client.put(
        f"/api/v1/articles/{article['id']}/stores/{store['id']}",
        headers=other_headers,
        json={"price": 1.0},
    )
    assert response.status_code == 403


def test_store_share_editor_can_update(client, auth_headers, other_headers):
    """An edit grant on a store allows updating it."""
    store = create_store(client, auth_headers, name="Family store")
    client.post(
        f"/api/v1/stores/{store['id']}/share",
        headers=auth_headers,
        json={"email": other_headers.email, "can_edit": True},
    )

    response = client.put(
        f"/api/v1/stores/{store['id']}", headers=other_headers, json={"address": "Main St 1"}
    )
    assert response.status_code == 200
    assert response.json()["address"] == "Main St 1"

    response = client.delete(
        f"/api/v1/stores/{store['id']}/share/{other_headers.user_id}", headers=other_headers
    )
    assert response.status_code == 403
