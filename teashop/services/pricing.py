"""Cart and checkout arithmetic.

All amounts are integer minor units (paise for INR). The tax rate and the
shipping fee are fixed for the whole store.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

TAX_RATE_PERCENT = 18
SHIPPING_FLAT_CENTS = 5000


@dataclass(frozen=True)
class Totals:
    subtotal_cents: int
    tax_cents: int
    shipping_cents: int
    total_cents: int


def effective_unit_price(price_cents: int, sale_price_cents: Optional[int]) -> int:
    return sale_price_cents if sale_price_cents is not None else price_cents


def discount_percent(price_cents: int, sale_price_cents: Optional[int]) -> int:
    if sale_price_cents is None or price_cents <= 0:
        return 0
    # half-up, like the storefront badge
    return (200 * (price_cents - sale_price_cents) + price_cents) // (2 * price_cents)


def tax_for(subtotal_cents: int) -> int:
    return (subtotal_cents * TAX_RATE_PERCENT + 50) // 100


def compute_totals(lines: Iterable[Tuple[int, Optional[int], int]]) -> Totals:
    """Totals for ``(price_cents, sale_price_cents, quantity)`` lines."""
    subtotal = sum(effective_unit_price(price, sale) * qty for price, sale, qty in lines)
    tax = tax_for(subtotal)
    return Totals(
        subtotal_cents=subtotal,
        tax_cents=tax,
        shipping_cents=SHIPPING_FLAT_CENTS,
        total_cents=subtotal + tax + SHIPPING_FLAT_CENTS,
    )


def cart_totals(items) -> Totals:
    """Totals for cart rows carrying a joined ``product``."""
    return compute_totals(
        (it.product.price_cents, it.product.sale_price_cents, it.quantity) for it in items
    )
