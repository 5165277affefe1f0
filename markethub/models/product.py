# markethub/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry for MarketHub.

    Cart logic treats this table as read-only: it is the source of truth
    for price and availability at the moment an item is added.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    price: float = Field(
        ge=0,
        description="Current unit price (USD)",
    )

    original_price: float | None = Field(
        default=None,
        ge=0,
        description="List price before markdown, shown struck-through",
    )

    stock_on_hand: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    track_inventory: bool = Field(
        default=True,
        description="When false, stock_on_hand is not enforced",
    )

    # active | inactive | discontinued
    status: str = Field(
        default="active",
        index=True,
        description="Only active products can be added to a cart",
    )

    hero_image_url: str | None = Field(
        default=None,
        description="Primary image URL",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
