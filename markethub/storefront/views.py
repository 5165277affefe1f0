# markethub/storefront/views.py
import uuid

from sqlmodel import SQLModel

from markethub.schemas.cart import LineItem

# Shown as the quantity cap for products that do not track stock
UNTRACKED_MAX_QUANTITY = 999


class CartLineView(SQLModel):
    """
    Display row for one cart line.
    """

    id: uuid.UUID
    name: str
    price: float
    original_price: float | None = None
    discount_percentage: int = 0
    quantity: int
    image: str | None = None
    in_stock: bool
    max_quantity: int
    variant: dict[str, str] | None = None
    subtotal: float


def format_line_item(item: LineItem) -> CartLineView:
    product = item.product

    discount = 0
    if product.original_price and product.original_price > product.price:
        discount = round((product.original_price - product.price) / product.original_price * 100)

    if product.track_inventory:
        in_stock = product.stock > 0
        max_quantity = product.stock
    else:
        in_stock = True
        max_quantity = UNTRACKED_MAX_QUANTITY

    return CartLineView(
        id=product.id,
        name=product.name,
        price=product.price,
        original_price=product.original_price,
        discount_percentage=discount,
        quantity=item.quantity,
        image=product.image_url,
        in_stock=in_stock,
        max_quantity=max_quantity,
        variant=item.variant,
        subtotal=round(product.price * item.quantity, 2),
    )
