from typing import List
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload
from teashop.core.errors import Conflict, NotFound
from teashop.db.models import CartItem, User
from teashop.services.catalog import get_product_row

def list_items(db: Session, user: User) -> List[CartItem]:
    stmt = (select(CartItem).options(joinedload(CartItem.product))
            .where(CartItem.user_id == user.id).order_by(CartItem.id))
    return list(db.execute(stmt).scalars().all())

def _get_item(db: Session, user: User, product_id: int):
    stmt = select(CartItem).where(CartItem.user_id == user.id, CartItem.product_id == product_id)
    return db.execute(stmt).scalars().first()

def add_item(db: Session, user: User, product_id: int, quantity: int) -> CartItem:
    product = get_product_row(db, product_id)
    item = _get_item(db, user, product_id)
    wanted = quantity + (item.quantity if item else 0)
    if product.stock <= 0:
        raise Conflict(f"{product.name} is out of stock")
    if wanted > product.stock:
        raise Conflict(f"Only {product.stock} left in stock for {product.name}")
    if item:
        item.quantity = wanted
    else:
        item = CartItem(user_id=user.id, product_id=product_id, quantity=quantity)
    db.add(item); db.commit(); db.refresh(item)
    return item

def set_quantity(db: Session, user: User, product_id: int, quantity: int) -> None:
    item = _get_item(db, user, product_id)
    if not item:
        raise NotFound("Item not in cart")
    if quantity == 0:
        db.delete(item)
    else:
        product = get_product_row(db, product_id)
        if quantity > product.stock:
            raise Conflict(f"Only {product.stock} left in stock for {product.name}")
        item.quantity = quantity
        db.add(item)
    db.commit()

def remove_item(db: Session, user: User, product_id: int) -> None:
    db.execute(delete(CartItem).where(CartItem.user_id == user.id, CartItem.product_id == product_id))
    db.commit()

def clear(db: Session, user: User, commit: bool = True) -> None:
    db.execute(delete(CartItem).where(CartItem.user_id == user.id))
    if commit:
        db.commit()
