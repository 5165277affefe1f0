# markethub/services/pricing.py
"""
Cart pricing.

Pure functions over line items. Used by the storefront cart, by the account
cart summaries returned from the API and by checkout, so every surface shows
the same figures for the same lines.
"""
from typing import Iterable, Protocol

from markethub.schemas.cart import CartTotals, ShippingOption

# Flat sales tax (8%), no jurisdiction logic
TAX_RATE = 0.08

# Orders strictly above this subtotal ship for free
FREE_SHIPPING_THRESHOLD = 50.00
FLAT_SHIPPING_FEE = 9.99

EXPRESS_SHIPPING_FEE = 19.99
OVERNIGHT_SHIPPING_FEE = 39.99


class PricedLine(Protocol):
    quantity: int

    @property
    def unit_price(self) -> float: ...


def shipping_for(subtotal: float, item_count: int = 1) -> float:
    """Standard shipping fee for a subtotal. Nothing to ship means no fee."""
    if item_count == 0:
        return 0.0
    return 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def calculate_totals(items: Iterable[PricedLine]) -> CartTotals:
    """
    Compute subtotal, tax, shipping, total and item count.

    - subtotal = sum(unit_price * quantity), rounded to cents
    - tax      = subtotal * TAX_RATE, rounded to cents
    - shipping = 0 above FREE_SHIPPING_THRESHOLD, else FLAT_SHIPPING_FEE
    - total    = subtotal + tax + shipping, rounded to cents
    """
    subtotal = 0.0
    item_count = 0
    for it in items:
        subtotal += it.unit_price * it.quantity
        item_count += it.quantity

    subtotal = round(subtotal, 2)
    tax = round(subtotal * TAX_RATE, 2)
    shipping = shipping_for(subtotal, item_count)
    total = round(subtotal + tax + shipping, 2)

    return CartTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=total,
        item_count=item_count,
    )


def shipping_options(subtotal: float) -> list[ShippingOption]:
    """
    Shipping choices offered at checkout for a given subtotal.
    Only standard shipping becomes free above the threshold.
    """
    free = subtotal > FREE_SHIPPING_THRESHOLD
    return [
        ShippingOption(
            id="standard",
            name="Standard Shipping",
            price=0.0 if free else FLAT_SHIPPING_FEE,
            estimated_days="5-7 business days",
            description=(
                f"Free shipping on orders over ${FREE_SHIPPING_THRESHOLD:.0f}"
                if free
                else "Standard delivery"
            ),
        ),
        ShippingOption(
            id="express",
            name="Express Shipping",
            price=EXPRESS_SHIPPING_FEE,
            estimated_days="2-3 business days",
            description="Faster delivery",
        ),
        ShippingOption(
            id="overnight",
            name="Overnight Shipping",
            price=OVERNIGHT_SHIPPING_FEE,
            estimated_days="1 business day",
            description="Next day delivery",
        ),
    ]
