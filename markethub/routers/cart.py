# markethub/routers/cart.py
import json
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import TypeAdapter, ValidationError
from sqlmodel import Session

from markethub.core.auth import require_user
from markethub.database import get_session
from markethub.models.user import User
from markethub.repositories.cart_repo import CartRepository
from markethub.repositories.product_repo import ProductRepository
from markethub.schemas.cart import (
    CartCount,
    CartItemCreate,
    CartItemUpdate,
    CartSummary,
    DiscountQuote,
    DiscountRequest,
    ShippingOption,
)
from markethub.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)

_variant_adapter = TypeAdapter(dict[str, str])


def variant_query(
    variant: str | None = Query(
        default=None,
        description='JSON object of selected options, e.g. {"Color": "Red"}',
    ),
) -> dict[str, str] | None:
    """Parse the optional `variant` query parameter of DELETE requests."""
    if variant is None:
        return None
    try:
        parsed = _variant_adapter.validate_python(json.loads(variant))
    except (ValueError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="variant must be a JSON object of strings",
        )
    return parsed or None


@router.get("", response_model=CartSummary)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Get current user's cart summary.

    Auth:
      - Only role='user' (customer) can access.
      - Admins are forbidden.
    """
    return service.get_cart_summary(session, current_user.id)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Add product to the current user's cart.

    Adding a (product, variant) pair already in the cart increments it.
    Returns the updated cart summary.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.get("/count", response_model=CartCount)
def get_cart_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Total number of units in the cart (badge count).
    """
    return service.count_items(session, current_user.id)


@router.get("/shipping-options", response_model=list[ShippingOption])
def get_shipping_options(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Shipping choices for the current cart subtotal.
    """
    return service.get_shipping_options(session, current_user.id)


@router.post("/discount", response_model=DiscountQuote)
def quote_discount(
    payload: DiscountRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Quote a discount code against the cart subtotal.

    Does not persist anything; the code is applied again at checkout.
    """
    return service.quote_discount(session, current_user.id, payload)


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Update quantity of a product in the cart. quantity=0 removes it.

    Returns the updated cart summary.
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        product_id=product_id,
        payload=payload,
    )


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: uuid.UUID,
    variant: dict[str, str] | None = Depends(variant_query),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Remove a product from the cart (all variants unless `variant` is given).

    Returns the updated cart summary.
    """
    return service.remove_item(session, current_user.id, product_id, variant)


@router.delete("", response_model=CartSummary)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Clear the entire cart.

    Returns an empty cart summary.
    """
    return service.clear_cart(session, current_user.id)
