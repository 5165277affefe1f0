# markethub/schemas/product.py
import uuid
from datetime import datetime
from typing import Any

from sqlmodel import SQLModel

from markethub.schemas.cart import ProductSnapshot, ProductStatus


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    price: float
    original_price: float | None = None
    stock_on_hand: int
    track_inventory: bool = True
    status: ProductStatus
    hero_image_url: str | None = None
    created_at: datetime


def snapshot_of(product: Any) -> ProductSnapshot:
    """
    Build the cart snapshot of a catalog product.

    Accepts the `Product` table model or a `ProductRead`; both expose the
    same attribute names.
    """
    return ProductSnapshot(
        id=product.id,
        name=product.name,
        price=product.price,
        original_price=product.original_price,
        stock=product.stock_on_hand,
        track_inventory=product.track_inventory,
        status=product.status,
        image_url=product.hero_image_url,
    )
