from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teashop.api.deps import get_db, get_current_user
from teashop.core.config import settings
from teashop.db.models import User
from teashop.schemas import CartItemAdd, CartItemRead, CartItemUpdate, CartRead, CartTotals
from teashop.services import cart
from teashop.services.pricing import cart_totals

router = APIRouter()

def _cart_read(db: Session, user: User) -> CartRead:
    items = cart.list_items(db, user)
    totals = cart_totals(items)
    return CartRead(items=[CartItemRead.model_validate(it) for it in items], totals=CartTotals(**vars(totals)), currency=settings.CURRENCY)

@router.get("/v1/cart", response_model=CartRead)
def get_my_cart(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _cart_read(db, user)

@router.post("/v1/cart/items", response_model=CartRead, status_code=201)
def add_item(payload: CartItemAdd, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    cart.add_item(db, user, payload.product_id, payload.quantity)
    return _cart_read(db, user)

@router.patch("/v1/cart/items/{product_id}", response_model=CartRead)
def update_item(product_id: int, payload: CartItemUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    # qty 0 removes the line
    cart.set_quantity(db, user, product_id, payload.quantity)
    return _cart_read(db, user)

@router.delete("/v1/cart/items/{product_id}", response_model=CartRead)
def remove_item(product_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    cart.remove_item(db, user, product_id)
    return _cart_read(db, user)

@router.post("/v1/cart/clear", response_model=CartRead)
def clear(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    cart.clear(db, user)
    return _cart_read(db, user)
