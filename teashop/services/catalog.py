"""Category and product data access.

Reads go through the query cache and return JSON-ready dicts; mutations
commit, then invalidate the cache families declared for them.
"""
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from teashop.core.config import settings
from teashop.core.errors import Conflict, Invalid, NotFound
from teashop.core.logging import get_logger
from teashop.db.models import CartItem, Category, Product
from teashop.schemas import (CategoryCreate, CategoryRead, CategoryUpdate, ProductCreate,
                             ProductRead, ProductUpdate)
from teashop.services.cache import get_cache, query_key

logger = get_logger(__name__)

DELETE_POLICIES = ("restrict", "cascade", "detach")
UNCATEGORIZED = "Uncategorized"


def _dump_category(obj: Category) -> Dict[str, Any]:
    return CategoryRead.model_validate(obj).model_dump(mode="json")


def _dump_product(obj: Product) -> Dict[str, Any]:
    return ProductRead.model_validate(obj).model_dump(mode="json")


# --- categories ---

def list_categories(db: Session) -> List[Dict[str, Any]]:
    def load():
        rows = db.execute(select(Category).order_by(Category.name)).scalars().all()
        return [_dump_category(c) for c in rows]
    return get_cache().get_or_load(query_key("categories"), load)


def get_category(db: Session, category_id: int) -> Category:
    obj = db.get(Category, category_id)
    if not obj:
        raise NotFound("Category not found")
    return obj


def _ensure_unique_name(db: Session, name: str, exclude_id: Optional[int] = None):
    stmt = select(Category.id).where(Category.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if db.execute(stmt).first():
        raise Conflict("Category already exists")


def create_category(db: Session, payload: CategoryCreate) -> Category:
    _ensure_unique_name(db, payload.name)
    obj = Category(**payload.model_dump())
    db.add(obj); db.commit(); db.refresh(obj)
    get_cache().invalidate("create_category")
    logger.info("category %s created (%s)", obj.id, obj.name)
    return obj


def update_category(db: Session, category_id: int, payload: CategoryUpdate) -> Category:
    obj = get_category(db, category_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    else:
        _ensure_unique_name(db, changes["name"], exclude_id=category_id)
    for k, v in changes.items(): setattr(obj, k, v)
    db.add(obj); db.commit(); db.refresh(obj)
    get_cache().invalidate("update_category")
    return obj


def delete_category(db: Session, category_id: int, policy: Optional[str] = None) -> int:
    """Delete a category and apply ``policy`` to its products.

    Returns how many products were deleted or detached.
    """
    policy = policy or settings.CATEGORY_DELETE_POLICY
    if policy not in DELETE_POLICIES:
        raise ValueError(f"unknown category delete policy {policy!r}")
    obj = get_category(db, category_id)
    product_ids = list(db.execute(select(Product.id).where(Product.category_id == category_id)).scalars())

    if product_ids and policy == "restrict":
        raise Conflict(f"Category still has {len(product_ids)} products")
    if product_ids and policy == "cascade":
        db.execute(delete(CartItem).where(CartItem.product_id.in_(product_ids)))
        db.execute(delete(Product).where(Product.id.in_(product_ids)))
    elif product_ids and policy == "detach":
        db.execute(update(Product).where(Product.id.in_(product_ids)).values(category_id=None))

    db.delete(obj)
    db.commit()
    get_cache().invalidate("delete_category")
    logger.info("category %s deleted, policy=%s, products affected=%d", category_id, policy, len(product_ids))
    return len(product_ids)


# --- products ---

def list_products(db: Session, category_id: Optional[int] = None, q: Optional[str] = None,
                  bestseller: Optional[bool] = None, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    def load():
        stmt = select(Product)
        if category_id is not None: stmt = stmt.where(Product.category_id == category_id)
        if q: stmt = stmt.where(Product.name.ilike(f"%{q.lower()}%"))
        if bestseller is not None: stmt = stmt.where(Product.is_bestseller == bestseller)
        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc()).offset(offset).limit(limit)
        return [_dump_product(p) for p in db.execute(stmt).scalars().all()]
    key = query_key("products", category_id, q, bestseller, limit, offset)
    return get_cache().get_or_load(key, load)


def get_product_row(db: Session, product_id: int) -> Product:
    obj = db.get(Product, product_id)
    if not obj:
        raise NotFound("Product not found")
    return obj


def get_product(db: Session, product_id: int) -> Dict[str, Any]:
    return get_cache().get_or_load(query_key("product", product_id),
                                   lambda: _dump_product(get_product_row(db, product_id)))


def _check_prices(price_cents: int, sale_price_cents: Optional[int]):
    if sale_price_cents is not None and sale_price_cents >= price_cents:
        raise Invalid("Sale price must be lower than price")


def create_product(db: Session, payload: ProductCreate) -> Product:
    get_category(db, payload.category_id)
    obj = Product(**payload.model_dump())
    db.add(obj); db.commit(); db.refresh(obj)
    get_cache().invalidate("create_product")
    logger.info("product %s created in category %s", obj.id, obj.category_id)
    return obj


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> Product:
    obj = get_product_row(db, product_id)
    changes = payload.model_dump(exclude_unset=True)
    # only sale_price_cents may be cleared with an explicit null
    for k in [k for k, v in changes.items() if v is None and k != "sale_price_cents"]:
        changes.pop(k)
    if "category_id" in changes:
        get_category(db, changes["category_id"])
    _check_prices(changes.get("price_cents", obj.price_cents),
                  changes.get("sale_price_cents", obj.sale_price_cents))
    for k, v in changes.items(): setattr(obj, k, v)
    db.add(obj); db.commit(); db.refresh(obj)
    get_cache().invalidate("update_product")
    return obj


def delete_product(db: Session, product_id: int) -> None:
    obj = get_product_row(db, product_id)
    db.execute(delete(CartItem).where(CartItem.product_id == product_id))
    db.delete(obj)
    db.commit()
    get_cache().invalidate("delete_product")


# --- views ---

def home_view(db: Session) -> Dict[str, Any]:
    return {"categories": list_categories(db), "bestsellers": list_products(db, bestseller=True, limit=12)}


def shop_view(db: Session, category_id: Optional[int] = None, limit: int = 50,
              offset: int = 0) -> List[Dict[str, Any]]:
    """Categories with one page of products each; limit/offset apply per category."""
    categories = list_categories(db)
    if category_id is not None:
        categories = [c for c in categories if c["id"] == category_id]
        if not categories:
            raise NotFound("Category not found")
    return [{"category": c, "products": list_products(db, category_id=c["id"], limit=limit, offset=offset)} for c in categories]


def group_products_by_category(categories: Iterable[Dict[str, Any]], products: Iterable[Dict[str, Any]],
                               expanded: Set[int]) -> List[Dict[str, Any]]:
    """Admin listing: one group per category, rows only for expanded groups."""
    by_category: Dict[Optional[int], List[Dict[str, Any]]] = {}
    for p in products:
        by_category.setdefault(p.get("category_id"), []).append(p)

    known = set()
    groups = []
    for c in categories:
        known.add(c["id"])
        rows = by_category.get(c["id"], [])
        is_open = c["id"] in expanded
        groups.append({"category": c, "name": c["name"], "product_count": len(rows),
                       "expanded": is_open, "products": rows if is_open else []})

    # products whose category is gone (detach policy or stale reference)
    orphans = [p for cid, rows in by_category.items() if cid not in known for p in rows]
    if orphans:
        is_open = 0 in expanded
        groups.append({"category": None, "name": UNCATEGORIZED, "product_count": len(orphans),
                       "expanded": is_open, "products": orphans if is_open else []})
    return groups


def admin_view(db: Session, expanded: Set[int]) -> List[Dict[str, Any]]:
    products = db.execute(select(Product).order_by(Product.name)).scalars().all()
    return group_products_by_category(list_categories(db), [_dump_product(p) for p in products], expanded)
