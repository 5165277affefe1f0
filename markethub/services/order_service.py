# markethub/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from markethub.models.cart import CartItem
from markethub.models.order import Order, OrderItem
from markethub.models.product import Product
from markethub.repositories.cart_repo import CartRepository
from markethub.repositories.order_repo import OrderRepository
from markethub.repositories.product_repo import ProductRepository
from markethub.schemas.cart import CartItemRead
from markethub.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderWithItemsRead,
)
from markethub.schemas.product import snapshot_of
from markethub.services.cart_service import to_cart_line
from markethub.services.discounts import DiscountError, apply_discount
from markethub.services.inventory import availability_message, availability_problem
from markethub.services.pricing import calculate_totals, shipping_options

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for checkout.

    Responsibilities:
      - Create order from cart
      - Validate cart items against products (stock, status)
      - Price the order with the cart pricing rules
      - Deduct stock_on_hand for tracked products
      - Clear cart after success
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart items; error if empty.
          2. For each cart item:
             - Ensure product exists & is active.
             - Ensure quantity <= stock_on_hand (tracked products).
          3. Price: subtotal/tax from the cart rules, shipping from the
             chosen option, optional discount on the subtotal.
          4. Create Order row (status='pending') and OrderItem rows.
          5. Deduct product stock_on_hand.
          6. Clear cart.
          7. Commit transaction and return full order.
        """
        # 1) Load cart
        cart_items: list[CartItem] = self.cart_repo.list_for_user(session, user_id)
        if not cart_items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 2) Validate each cart item vs product
        errors: list[dict[str, str]] = []
        product_map: dict[uuid.UUID, Product] = {}
        lines: list[CartItemRead] = []

        for ci in cart_items:
            product = self.product_repo.get_by_id(session, ci.product_id)
            lines.append(to_cart_line(ci, product))

            if not product:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": "Product not found",
                    }
                )
                continue

            product_map[ci.product_id] = product
            snapshot = snapshot_of(product)
            requested = sum(
                other.quantity for other in cart_items if other.product_id == ci.product_id
            )
            problem = availability_problem(snapshot, requested)
            if problem is not None:
                errors.append(
                    {
                        "product_id": str(ci.product_id),
                        "reason": availability_message(snapshot, problem),
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        # 3) Price the order
        totals = calculate_totals(lines)
        shipping = next(
            opt.price
            for opt in shipping_options(totals.subtotal)
            if opt.id == payload.shipping_method
        )

        discount_code: str | None = None
        discount_amount = 0.0
        if payload.discount_code:
            try:
                quote = apply_discount(payload.discount_code, totals.subtotal)
            except DiscountError as e:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=str(e),
                )
            discount_code = quote.code
            discount_amount = quote.amount

        total_amount = round(totals.subtotal + totals.tax + shipping - discount_amount, 2)

        # 4) Create the Order and its items
        order = Order(
            user_id=user_id,
            receiver_name=payload.receiver_name,
            phone_number=payload.phone_number,
            full_address=payload.full_address,
            note=payload.note,
            shipping_method=payload.shipping_method,
            discount_code=discount_code,
            status="pending",
            subtotal=totals.subtotal,
            tax_amount=totals.tax,
            shipping_amount=shipping,
            discount_amount=discount_amount,
            total_amount=total_amount,
        )
        order, order_items = self.order_repo.place(
            session,
            order,
            [
                OrderItem(
                    product_id=ci.product_id,
                    quantity=ci.quantity,
                    variant=ci.variant,
                    unit_price=ci.snapshot_price,
                    product_name=ci.product_name or product_map[ci.product_id].name,
                )
                for ci in cart_items
            ],
        )

        # 5) Deduct stock_on_hand
        for ci in cart_items:
            product = product_map[ci.product_id]
            if not product.track_inventory:
                continue
            product.stock_on_hand -= ci.quantity
            if product.stock_on_hand < 0:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Internal stock calculation error",
                )
            session.add(product)

        # 6) Clear cart
        for ci in cart_items:
            session.delete(ci)

        # 7) Commit transaction
        session.commit()
        session.refresh(order)

        logger.info(
            "Order %s placed by %s: %d lines, total %.2f",
            order.id,
            user_id,
            len(order_items),
            order.total_amount,
        )
        return self._build_order_with_items_dto(order, order_items)

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user (without items).
        """
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        # Pydantic/SQLModel will map to OrderRead automatically via response_model.
        return orders  # type: ignore[return-value]

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderWithItemsRead:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, user_id, order_id)
        if order is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.lines_of(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Helper DTO builder --------

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        """
        Compose OrderWithItemsRead from ORM models.
        """
        item_dtos = [
            OrderItemRead(
                id=it.id,
                order_id=it.order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                variant=it.variant,
                quantity=it.quantity,
                unit_price=it.unit_price,
                line_total=round(it.quantity * it.unit_price, 2),
            )
            for it in items
        ]

        return OrderWithItemsRead(
            **OrderRead.model_validate(order).model_dump(),
            items=item_dtos,
        )
