# markethub/services/inventory.py
from enum import Enum

from markethub.schemas.cart import ProductSnapshot


class CartFailure(str, Enum):
    """
    Reasons a cart operation can be refused.

    The value is the human-readable reason shown to the shopper.
    """

    INVALID_QUANTITY = "invalid quantity"
    MISSING_PRODUCT_ID = "missing product id"
    PRODUCT_UNAVAILABLE = "product unavailable"
    OUT_OF_STOCK = "out of stock"
    INSUFFICIENT_STOCK = "insufficient stock"
    ITEM_NOT_FOUND = "item not found"
    VARIANT_REQUIRED = "variant required"
    PERSISTENCE_FAILED = "persistence failed"
    INVALID_DISCOUNT = "invalid discount"


def availability_problem(product: ProductSnapshot, requested: int) -> CartFailure | None:
    """
    Check whether `requested` units of `product` may sit in a cart.

    `requested` is the total the cart would hold for the product (every
    variant counted), not the increment.
    Stock is only enforced when the product tracks inventory.
    """
    if product.status != "active":
        return CartFailure.PRODUCT_UNAVAILABLE
    if not product.track_inventory:
        return None
    if product.stock <= 0:
        return CartFailure.OUT_OF_STOCK
    if requested > product.stock:
        return CartFailure.INSUFFICIENT_STOCK
    return None


def availability_message(product: ProductSnapshot, problem: CartFailure) -> str:
    if problem == CartFailure.PRODUCT_UNAVAILABLE:
        return f"{product.name} is not available"
    if problem == CartFailure.OUT_OF_STOCK:
        return f"{product.name} is out of stock"
    if problem == CartFailure.INSUFFICIENT_STOCK:
        return f"Only {product.stock} items available in stock"
    return problem.value
