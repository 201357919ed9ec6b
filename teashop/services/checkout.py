"""Order placement.

The order, its line snapshots, the payment record, the stock decrement and
the cart clear are written in one transaction: either all of them land or
none do.
"""
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teashop.core.config import settings
from teashop.core.errors import EmptyCart, InsufficientStock, MissingShippingAddress, OrderPlacementFailed
from teashop.core.logging import get_logger
from teashop.db.models import Order, OrderItem, Payment, PaymentMethod, Product, User
from teashop.services import accounts, cart
from teashop.services.cache import get_cache
from teashop.services.pricing import cart_totals

logger = get_logger(__name__)


@dataclass
class PlacedOrder:
    order: Order
    payment: Payment

    @property
    def confirmation_url(self) -> str:
        return f"/orders/{self.order.id}"


def generate_order_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now:%Y%m%d%H%M%S}-{secrets.token_hex(4).upper()}"


def place_order(db: Session, user: User, shipping_address_id: Optional[int],
                payment_method: PaymentMethod, billing_address_id: Optional[int] = None,
                same_as_shipping: bool = True) -> PlacedOrder:
    if not shipping_address_id:
        raise MissingShippingAddress()
    items = cart.list_items(db, user)
    if not items:
        raise EmptyCart()
    shipping = accounts.get_address(db, user, shipping_address_id)
    billing = shipping
    if not same_as_shipping and billing_address_id:
        billing = accounts.get_address(db, user, billing_address_id)
    for it in items:
        if it.quantity > it.product.stock:
            raise InsufficientStock(it.product.name, it.product.stock)

    totals = cart_totals(items)
    try:
        order = Order(
            user_id=user.id,
            order_number=generate_order_number(),
            status="CREATED",
            subtotal_cents=totals.subtotal_cents,
            tax_cents=totals.tax_cents,
            shipping_cents=totals.shipping_cents,
            total_cents=totals.total_cents,
            currency=settings.CURRENCY,
            shipping_address_id=shipping.id,
            billing_address_id=billing.id,
        )
        for it in items:
            order.items.append(OrderItem(
                product_id=it.product_id,
                product_name=it.product.name,
                quantity=it.quantity,
                price_at_purchase_cents=it.product.price_cents,
                sale_price_at_purchase_cents=it.product.sale_price_cents,
            ))
            # stock may have moved since the check above
            taken = db.execute(
                update(Product)
                .where(Product.id == it.product_id, Product.stock >= it.quantity)
                .values(stock=Product.stock - it.quantity)
            ).rowcount
            if taken != 1:
                db.rollback()
                raise InsufficientStock(it.product.name, it.product.stock)
        db.add(order)
        db.flush()

        payment = Payment(order_id=order.id, amount_cents=order.total_cents,
                          currency=order.currency, payment_method=payment_method)
        db.add(payment)
        cart.clear(db, user, commit=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("order placement failed for user %s", user.id)
        raise OrderPlacementFailed()

    db.refresh(order)
    get_cache().invalidate("place_order")
    logger.info("order %s (%s) placed by user %s, total=%d %s",
                order.id, order.order_number, user.id, order.total_cents, order.currency)
    return PlacedOrder(order=order, payment=payment)
