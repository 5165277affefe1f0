# markethub/schemas/cart.py
import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import field_validator
from sqlmodel import SQLModel, Field

ProductStatus = Literal["active", "inactive", "discontinued"]
DiscountType = Literal["percentage", "fixed"]


class ProductSnapshot(SQLModel):
    """
    Copy of the product taken when it was put in a cart.

    Not live-joined: a later catalog price change does not alter the
    unit price of a line that already holds this snapshot.
    """

    id: uuid.UUID
    name: str
    price: float = Field(ge=0)
    original_price: float | None = None
    stock: int = Field(default=0, ge=0)
    track_inventory: bool = True
    status: ProductStatus = "active"
    image_url: str | None = None


class LineItem(SQLModel):
    """
    One product + variant + quantity entry in a cart.
    """

    product: ProductSnapshot
    quantity: int = Field(ge=1)
    variant: dict[str, str] | None = None
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("variant")
    @classmethod
    def normalize_variant(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        # {} and None both mean "no options selected"
        return v or None

    @property
    def product_id(self) -> uuid.UUID:
        return self.product.id

    @property
    def unit_price(self) -> float:
        return self.product.price


class CartTotals(SQLModel):
    """
    Derived cart figures. Recomputed from the items on every read.
    """

    subtotal: float
    tax: float
    shipping: float
    total: float
    item_count: int


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)
    variant: dict[str, str] | None = None

    @field_validator("variant")
    @classmethod
    def normalize_variant(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        return v or None


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.

    quantity == 0 removes the line.
    """

    quantity: int = Field(ge=0)
    variant: dict[str, str] | None = None

    @field_validator("variant")
    @classmethod
    def normalize_variant(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        return v or None


class CartItemRead(LineItem):
    """
    Read model for a single account cart line, including line_total.
    """

    id: uuid.UUID
    line_total: float


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    totals: CartTotals


class CartCount(SQLModel):
    count: int


class ShippingOption(SQLModel):
    id: str
    name: str
    price: float
    estimated_days: str
    description: str


class DiscountRequest(SQLModel):
    code: str

    @field_validator("code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code cannot be empty")
        return v


class DiscountQuote(SQLModel):
    """
    Result of applying a discount code to a cart total.
    """

    code: str
    type: DiscountType
    value: float
    amount: float
    description: str
