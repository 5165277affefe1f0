# markethub/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

ShippingMethod = Literal["standard", "express", "overnight"]
OrderStatus = Literal["pending", "confirmed", "shipped", "canceled"]


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - receiver_name (optional)
      - note (optional)
      - phone_number
      - shipping address
      - shipping method (defaults to standard)
      - discount code (optional)

    Backend derives:
      - user_id from token
      - status = 'pending'
      - subtotal / tax / shipping / discount / total from cart
      - items from cart
    """

    model_config = ConfigDict(extra="forbid")

    receiver_name: str | None = None
    phone_number: str
    full_address: str
    note: str | None = None
    shipping_method: ShippingMethod = "standard"
    discount_code: str | None = None

    @field_validator("full_address", "phone_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("receiver_name", "note", "discount_code")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    receiver_name: str | None
    phone_number: str
    full_address: str
    note: str | None
    shipping_method: ShippingMethod
    discount_code: str | None
    status: OrderStatus
    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    total_amount: float
    created_at: datetime


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None = None
    variant: dict[str, str] | None = None
    quantity: int
    unit_price: float
    line_total: float


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]
