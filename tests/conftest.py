import os

os.environ["POSTGRES_DSN"] = "sqlite+pysqlite:///:memory:"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CATEGORY_DELETE_POLICY"] = "restrict"

import fakeredis
import pytest
from fastapi.testclient import TestClient

from teashop.db.session import Base, SessionLocal, engine
from teashop.db.models import Address, CartItem, Category, Product, User
from teashop.core.security import hash_password
from teashop.services import cache as cache_module
from teashop.main import app


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def query_cache(monkeypatch):
    qc = cache_module.QueryCache(fakeredis.FakeRedis(decode_responses=True), ttl_seconds=60)
    monkeypatch.setattr(cache_module, "_cache", qc)
    return qc


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def _signup(client, email):
    resp = client.post("/auth/signup", json={"email": email, "password": "oolong-1234"})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return _signup(client, "admin@example.com")


@pytest.fixture
def customer_headers(client):
    return _signup(client, "leaf@example.com")


@pytest.fixture
def customer(db):
    user = User(email="brew@example.com", password_hash=hash_password("oolong-1234"), role="customer")
    db.add(user); db.commit(); db.refresh(user)
    return user


@pytest.fixture
def catalog(db):
    """Two categories, three products; the Masala Chai is on sale."""
    black = Category(name="Black Tea", description="Bold and malty")
    green = Category(name="Green Tea")
    db.add_all([black, green]); db.flush()
    products = {
        "assam": Product(category_id=black.id, name="Assam Breakfast", price_cents=30000,
                         image_url="http://img/assam.jpg", stock=10),
        "chai": Product(category_id=black.id, name="Masala Chai", price_cents=50000, sale_price_cents=40000,
                        image_url="http://img/chai.jpg", stock=5, is_bestseller=True),
        "sencha": Product(category_id=green.id, name="Sencha", price_cents=45000,
                          image_url="http://img/sencha.jpg", stock=0),
    }
    db.add_all(products.values()); db.commit()
    return {"black": black, "green": green, **products}


@pytest.fixture
def address(db, customer):
    addr = Address(user_id=customer.id, full_name="Asha Rao", street_address="12 Tea Garden Road",
                   city="Darjeeling", state="West Bengal", postal_code="734101", phone="+91 90000 00000")
    db.add(addr); db.commit(); db.refresh(addr)
    return addr


@pytest.fixture
def filled_cart(db, customer, catalog):
    db.add_all([
        CartItem(user_id=customer.id, product_id=catalog["chai"].id, quantity=2),
        CartItem(user_id=customer.id, product_id=catalog["assam"].id, quantity=1),
    ])
    db.commit()
    return customer
