def test_cart_requires_sign_in(client):
    resp = client.get("/cart/v1/cart")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Not authenticated"


def test_empty_cart_still_quotes_shipping(client, customer_headers):
    body = client.get("/cart/v1/cart", headers=customer_headers).json()
    assert body["items"] == []
    assert body["currency"] == "INR"
    assert body["totals"] == {"subtotal_cents": 0, "tax_cents": 0, "shipping_cents": 5000, "total_cents": 5000}


def test_add_items_and_totals(client, customer_headers, catalog):
    client.post("/cart/v1/cart/items", json={"product_id": catalog["chai"].id, "quantity": 2}, headers=customer_headers)
    resp = client.post("/cart/v1/cart/items", json={"product_id": catalog["assam"].id}, headers=customer_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert [(i["product"]["name"], i["quantity"]) for i in body["items"]] == [("Masala Chai", 2), ("Assam Breakfast", 1)]
    assert body["totals"] == {"subtotal_cents": 110000, "tax_cents": 19800, "shipping_cents": 5000, "total_cents": 134800}


def test_adding_same_product_accumulates(client, customer_headers, catalog):
    for _ in range(2):
        client.post("/cart/v1/cart/items", json={"product_id": catalog["assam"].id, "quantity": 3}, headers=customer_headers)
    items = client.get("/cart/v1/cart", headers=customer_headers).json()["items"]
    assert [i["quantity"] for i in items] == [6]


def test_cannot_add_beyond_stock(client, customer_headers, catalog):
    resp = client.post("/cart/v1/cart/items", json={"product_id": catalog["chai"].id, "quantity": 6}, headers=customer_headers)
    assert resp.status_code == 409
    resp = client.post("/cart/v1/cart/items", json={"product_id": catalog["sencha"].id}, headers=customer_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Sencha is out of stock"


def test_quantity_must_be_positive(client, customer_headers, catalog):
    resp = client.post("/cart/v1/cart/items", json={"product_id": catalog["chai"].id, "quantity": 0}, headers=customer_headers)
    assert resp.status_code == 422


def test_unknown_product(client, customer_headers):
    resp = client.post("/cart/v1/cart/items", json={"product_id": 999}, headers=customer_headers)
    assert resp.status_code == 404


def test_update_remove_and_clear(client, customer_headers, catalog):
    chai, assam = catalog["chai"].id, catalog["assam"].id
    client.post("/cart/v1/cart/items", json={"product_id": chai, "quantity": 1}, headers=customer_headers)
    client.post("/cart/v1/cart/items", json={"product_id": assam, "quantity": 1}, headers=customer_headers)

    body = client.patch(f"/cart/v1/cart/items/{chai}", json={"quantity": 4}, headers=customer_headers).json()
    assert {i["product_id"]: i["quantity"] for i in body["items"]} == {chai: 4, assam: 1}

    body = client.patch(f"/cart/v1/cart/items/{chai}", json={"quantity": 0}, headers=customer_headers).json()
    assert [i["product_id"] for i in body["items"]] == [assam]

    assert client.patch(f"/cart/v1/cart/items/{chai}", json={"quantity": 1}, headers=customer_headers).status_code == 404

    body = client.delete(f"/cart/v1/cart/items/{assam}", headers=customer_headers).json()
    assert body["items"] == []

    client.post("/cart/v1/cart/items", json={"product_id": assam, "quantity": 2}, headers=customer_headers)
    body = client.post("/cart/v1/cart/clear", headers=customer_headers).json()
    assert body["items"] == []


def test_carts_are_per_user(client, customer_headers, admin_headers, catalog):
    client.post("/cart/v1/cart/items", json={"product_id": catalog["assam"].id}, headers=customer_headers)
    assert client.get("/cart/v1/cart", headers=admin_headers).json()["items"] == []
