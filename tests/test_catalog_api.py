import pytest
from sqlalchemy import select

from teashop.db.models import CartItem, Product

PRODUCT = {
    "name": "Darjeeling First Flush",
    "description": "Light and floral",
    "price_cents": 60000,
    "sale_price_cents": 45000,
    "image_url": "http://minio:9000/teashop-media/products/ff.jpg",
    "stock": 12,
    "is_bestseller": True,
}


def _create_category(client, headers, name="Black Tea"):
    resp = client.post("/catalog/v1/categories/", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_categories_are_listed_by_name(client, catalog):
    names = [c["name"] for c in client.get("/catalog/v1/categories/").json()]
    assert names == ["Black Tea", "Green Tea"]


def test_category_crud(client, admin_headers):
    created = _create_category(client, admin_headers, "White Tea")
    assert created["name"] == "White Tea"

    dup = client.post("/catalog/v1/categories/", json={"name": "White Tea"}, headers=admin_headers)
    assert dup.status_code == 409

    resp = client.patch(f"/catalog/v1/categories/{created['id']}",
                        json={"description": "Silver needle and peony"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["description"] == "Silver needle and peony"

    resp = client.delete(f"/catalog/v1/categories/{created['id']}", headers=admin_headers)
    assert resp.status_code == 204
    assert client.get(f"/catalog/v1/categories/{created['id']}").status_code == 404


def test_empty_category_name_is_rejected(client, admin_headers):
    resp = client.post("/catalog/v1/categories/", json={"name": ""}, headers=admin_headers)
    assert resp.status_code == 422


def test_catalog_writes_need_admin(client, customer_headers):
    assert client.post("/catalog/v1/categories/", json={"name": "Oolong"}).status_code == 401
    assert client.post("/catalog/v1/categories/", json={"name": "Oolong"}, headers=customer_headers).status_code == 403


def test_product_crud(client, admin_headers):
    category = _create_category(client, admin_headers)
    resp = client.post("/catalog/v1/products/", json={**PRODUCT, "category_id": category["id"]}, headers=admin_headers)
    assert resp.status_code == 201, resp.text
    product = resp.json()
    assert product["effective_price_cents"] == 45000
    assert product["discount_percent"] == 25

    resp = client.patch(f"/catalog/v1/products/{product['id']}", json={"stock": 3, "sale_price_cents": None},
                        headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["stock"] == 3
    assert resp.json()["sale_price_cents"] is None
    assert resp.json()["effective_price_cents"] == 60000

    assert client.get(f"/catalog/v1/products/{product['id']}").json()["stock"] == 3

    assert client.delete(f"/catalog/v1/products/{product['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/catalog/v1/products/{product['id']}").status_code == 404


@pytest.mark.parametrize("override", [
    {"name": "X"},
    {"price_cents": -1},
    {"stock": -5},
    {"image_url": ""},
    {"sale_price_cents": 60000},
])
def test_product_validation(client, admin_headers, override):
    category = _create_category(client, admin_headers)
    payload = {**PRODUCT, "category_id": category["id"], **override}
    assert client.post("/catalog/v1/products/", json=payload, headers=admin_headers).status_code == 422


def test_product_needs_existing_category(client, admin_headers):
    resp = client.post("/catalog/v1/products/", json={**PRODUCT, "category_id": 404}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Category not found"


def test_patch_cannot_raise_sale_price_above_price(client, admin_headers, catalog):
    resp = client.patch(f"/catalog/v1/products/{catalog['chai'].id}", json={"price_cents": 35000},
                        headers=admin_headers)
    assert resp.status_code == 422


def test_products_filter_by_category(client, catalog):
    resp = client.get("/catalog/v1/products/", params={"category_id": catalog["black"].id})
    assert {p["name"] for p in resp.json()} == {"Assam Breakfast", "Masala Chai"}
    resp = client.get("/catalog/v1/products/", params={"q": "sen"})
    assert [p["name"] for p in resp.json()] == ["Sencha"]


def test_product_list_is_cached_until_a_mutation(client, admin_headers, catalog, query_cache):
    first = client.get("/catalog/v1/products/", params={"category_id": catalog["green"].id}).json()
    assert len(first) == 1
    assert query_cache.client.keys("query:products:*")

    resp = client.post("/catalog/v1/products/", json={**PRODUCT, "category_id": catalog["green"].id},
                       headers=admin_headers)
    assert resp.status_code == 201
    assert not query_cache.client.keys("query:products:*")

    again = client.get("/catalog/v1/products/", params={"category_id": catalog["green"].id}).json()
    assert len(again) == 2


def test_delete_unused_category_succeeds_under_restrict(client, admin_headers, catalog, db):
    db.query(Product).filter(Product.category_id == catalog["green"].id).delete()
    db.commit()
    assert client.delete(f"/catalog/v1/categories/{catalog['green'].id}", headers=admin_headers).status_code == 204


def test_delete_used_category_is_restricted_by_default(client, admin_headers, catalog):
    resp = client.delete(f"/catalog/v1/categories/{catalog['black'].id}", headers=admin_headers)
    assert resp.status_code == 409
    assert "2 products" in resp.json()["detail"]
    assert client.get(f"/catalog/v1/categories/{catalog['black'].id}").status_code == 200


def test_delete_category_cascade_removes_products_and_cart_lines(client, admin_headers, catalog, customer, db):
    db.add(CartItem(user_id=customer.id, product_id=catalog["chai"].id, quantity=1))
    db.commit()

    resp = client.delete(f"/catalog/v1/categories/{catalog['black'].id}", params={"policy": "cascade"},
                         headers=admin_headers)
    assert resp.status_code == 204
    names = [p["name"] for p in client.get("/catalog/v1/products/").json()]
    assert names == ["Sencha"]
    assert db.execute(select(CartItem)).first() is None


def test_delete_category_detach_keeps_products(client, admin_headers, catalog, db):
    resp = client.delete(f"/catalog/v1/categories/{catalog['black'].id}", params={"policy": "detach"},
                         headers=admin_headers)
    assert resp.status_code == 204
    db.expire_all()
    assert db.get(Product, catalog["chai"].id).category_id is None


def test_unknown_delete_policy_is_rejected(client, admin_headers, catalog):
    resp = client.delete(f"/catalog/v1/categories/{catalog['black'].id}", params={"policy": "shrug"},
                         headers=admin_headers)
    assert resp.status_code == 422


def test_image_upload_returns_public_url(client, admin_headers, monkeypatch):
    calls = []

    def fake_upload(data, content_type, folder="products", ext=""):
        calls.append((data, content_type, folder, ext))
        return f"{folder}/abc{ext}", f"http://minio:9000/teashop-media/{folder}/abc{ext}"
    monkeypatch.setattr("teashop.api.products.upload_bytes", fake_upload)

    resp = client.post("/catalog/v1/images/", files={"file": ("leaf.PNG", b"\x89PNG", "image/png")},
                       headers=admin_headers)
    assert resp.status_code == 201, resp.text
    assert resp.json() == {"object_key": "products/abc.png", "url": "http://minio:9000/teashop-media/products/abc.png"}
    assert calls == [(b"\x89PNG", "image/png", "products", ".png")]


def test_image_upload_rejects_non_images(client, admin_headers):
    resp = client.post("/catalog/v1/images/", files={"file": ("notes.txt", b"hi", "text/plain")},
                       headers=admin_headers)
    assert resp.status_code == 422
