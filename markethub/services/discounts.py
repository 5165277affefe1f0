# markethub/services/discounts.py
from dataclasses import dataclass

from markethub.schemas.cart import DiscountQuote, DiscountType


class DiscountError(ValueError):
    """Raised when a code does not exist or the cart does not qualify."""


@dataclass(frozen=True)
class DiscountRule:
    type: DiscountType
    value: float
    min_order: float


DISCOUNT_CODES: dict[str, DiscountRule] = {
    "SAVE10": DiscountRule(type="percentage", value=10, min_order=50),
    "WELCOME20": DiscountRule(type="percentage", value=20, min_order=100),
    "FLAT5": DiscountRule(type="fixed", value=5, min_order=25),
}


def apply_discount(code: str, cart_total: float) -> DiscountQuote:
    """
    Quote the discount a code gives on `cart_total`.

    Codes are case-insensitive. A fixed discount never exceeds the total.

    Raises:
        DiscountError: unknown code, or cart_total below the code's minimum.
    """
    normalized = code.strip().upper()
    rule = DISCOUNT_CODES.get(normalized)
    if rule is None:
        raise DiscountError("Invalid discount code")

    if cart_total < rule.min_order:
        raise DiscountError(
            f"Minimum order of ${rule.min_order:g} required for this discount"
        )

    if rule.type == "percentage":
        amount = cart_total * rule.value / 100
        description = f"{rule.value:g}% off"
    else:
        amount = min(rule.value, cart_total)
        description = f"${rule.value:g} off"

    return DiscountQuote(
        code=normalized,
        type=rule.type,
        value=rule.value,
        amount=round(amount, 2),
        description=description,
    )
