# markethub/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

CUSTOMER_ROLE = "user"
ADMIN_ROLE = "admin"


class User(SQLModel, table=True):
    """
    Local owner record for carts and orders.

    Accounts are issued elsewhere; the first authenticated request creates
    this row from the token claims. Guests never get one.
    """

    __tablename__ = "users"

    # Token subject
    id: uuid.UUID = Field(primary_key=True, index=True)
    email: str = Field(unique=True, index=True)
    name: str = Field(max_length=50)

    # Only customers may hold a cart; admins are promoted by hand
    role: str = Field(default=CUSTOMER_ROLE, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def is_customer(self) -> bool:
        return self.role == CUSTOMER_ROLE

    @classmethod
    def from_token_claims(cls, account_id: uuid.UUID, email: str) -> "User":
        """New customer profile named after the local part of `email`."""
        name = email.split("@", 1)[0] if "@" in email else email
        return cls(id=account_id, email=email, name=name[:50], role=CUSTOMER_ROLE)
