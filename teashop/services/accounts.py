from typing import List
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from teashop.core.errors import NotFound
from teashop.db.models import Address, Order, User
from teashop.schemas import AddressCreate

def list_addresses(db: Session, user: User) -> List[Address]:
    return list(db.execute(select(Address).where(Address.user_id == user.id).order_by(Address.id)).scalars())

def create_address(db: Session, user: User, payload: AddressCreate) -> Address:
    obj = Address(user_id=user.id, **payload.model_dump())
    db.add(obj); db.commit(); db.refresh(obj)
    return obj

def get_address(db: Session, user: User, address_id: int) -> Address:
    obj = db.get(Address, address_id)
    if not obj or obj.user_id != user.id:
        raise NotFound("Address not found")
    return obj

def list_orders(db: Session, user: User) -> List[Order]:
    stmt = (select(Order).options(selectinload(Order.items), selectinload(Order.payments))
            .where(Order.user_id == user.id).order_by(Order.created_at.desc(), Order.id.desc()))
    return list(db.execute(stmt).scalars())

def get_order(db: Session, user: User, order_id: int) -> Order:
    obj = db.get(Order, order_id)
    # admins may open any confirmation page
    if not obj or (obj.user_id != user.id and user.role != "admin"):
        raise NotFound("Order not found")
    return obj
