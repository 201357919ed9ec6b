from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session

from teashop.api.deps import get_db, get_current_user
from teashop.db.models import User
from teashop.schemas import CheckoutPayload, CheckoutResponse, OrderRead
from teashop.services import accounts, checkout

router = APIRouter()

@router.post("/checkout", response_model=CheckoutResponse, status_code=201)
def place_order(payload: CheckoutPayload, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    placed = checkout.place_order(
        db, user,
        shipping_address_id=payload.shipping_address_id,
        payment_method=payload.payment_method,
        billing_address_id=payload.billing_address_id,
        same_as_shipping=payload.same_as_shipping,
    )
    order = placed.order
    return CheckoutResponse(
        order_id=order.id,
        order_number=order.order_number,
        status=order.status,
        subtotal_cents=order.subtotal_cents,
        tax_cents=order.tax_cents,
        shipping_cents=order.shipping_cents,
        total_cents=order.total_cents,
        currency=order.currency,
        payment_id=placed.payment.id,
        confirmation_url=placed.confirmation_url,
    )

@router.get("", response_model=List[OrderRead])
def list_my_orders(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return accounts.list_orders(db, user)

@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return accounts.get_order(db, user, order_id)
