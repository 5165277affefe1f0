# markethub/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order created from an account cart at checkout.

    Price components are stored as computed at checkout time so later
    catalog changes never alter a placed order.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    receiver_name: str | None = Field(
        default=None,
        description="Name of the person receiving the order (optional)",
    )
    phone_number: str = Field(
        description="Contact phone number for delivery",
    )
    full_address: str = Field(
        description="Full delivery address",
    )
    note: str | None = Field(
        default=None,
        description="Optional note / special instructions",
    )

    # standard | express | overnight
    shipping_method: str = Field(
        default="standard",
        description="Shipping option chosen at checkout",
    )

    discount_code: str | None = Field(
        default=None,
        description="Applied discount code, upper-cased",
    )

    # Hand-off only; fulfilment states are managed elsewhere.
    status: str = Field(
        default="pending",
        index=True,
    )

    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float = 0.0
    total_amount: float = Field(
        description="Final amount for this order (tax and shipping included)",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order, copied from the cart line.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    variant: dict[str, str] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
    )

    # Pre-tax price at time of order
    unit_price: float = Field(
        description="Unit price at time of order (pre-tax)",
    )

    product_name: str | None = None
