# markethub/routers/orders.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from markethub.core.auth import require_user
from markethub.database import get_session
from markethub.models.user import User
from markethub.repositories.cart_repo import CartRepository
from markethub.repositories.order_repo import OrderRepository
from markethub.repositories.product_repo import ProductRepository
from markethub.schemas.order import OrderCreate, OrderRead, OrderWithItemsRead
from markethub.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, cart_repo, product_repo)


@router.post(
    "/checkout",
    response_model=OrderWithItemsRead,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Create an order from the current user's cart.

    The account cart is emptied in the same transaction.

    Auth:
      - Only role='user' (customer) can checkout.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders (without items).
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderWithItemsRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_user),
):
    """
    Get a single order (with items) belonging to the current user.
    """
    return service.get_user_order(session, current_user.id, order_id)
