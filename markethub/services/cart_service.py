# markethub/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from markethub.models.cart import CartItem
from markethub.models.product import Product
from markethub.repositories.cart_repo import CartRepository
from markethub.repositories.product_repo import ProductRepository
from markethub.schemas.cart import (
    CartCount,
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartSummary,
    DiscountQuote,
    DiscountRequest,
    ProductSnapshot,
    ShippingOption,
)
from markethub.schemas.product import snapshot_of
from markethub.services.discounts import DiscountError, apply_discount
from markethub.services.inventory import availability_message, availability_problem
from markethub.services.pricing import calculate_totals, shipping_options


def to_cart_line(item: CartItem, product: Product | None) -> CartItemRead:
    """
    Read model of a stored cart row.

    Price, name and image come from the row's snapshot;
    stock and status reflect the catalog right now.
    """
    snapshot = ProductSnapshot(
        id=item.product_id,
        name=item.product_name or (product.name if product else ""),
        price=item.snapshot_price,
        original_price=item.product_original_price,
        stock=product.stock_on_hand if product else 0,
        track_inventory=product.track_inventory if product else True,
        status=product.status if product else "discontinued",
        image_url=item.product_hero_image_url,
    )
    return CartItemRead(
        id=item.id,
        product=snapshot,
        quantity=item.quantity,
        variant=item.variant,
        added_at=item.created_at,
        line_total=round(item.quantity * item.snapshot_price, 2),
    )


class CartService:
    """
    Business logic for account carts.

    Responsibilities:
      - ensure only 'user' accounts use cart (via router dependency)
      - validate product existence and active status
      - enforce line quantity <= stock_on_hand for tracked products
      - increment an existing (product, variant) line instead of duplicating it
      - snapshot price/name/image from the product on first add
      - price the cart through the shared pricing calculator
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if product.status != "active":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is not available",
            )
        return product

    @staticmethod
    def _ensure_stock(product: Product, requested: int) -> None:
        snapshot = snapshot_of(product)
        problem = availability_problem(snapshot, requested)
        if problem is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=availability_message(snapshot, problem),
            )

    # ---- public operations ----

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with line_total)
          - totals (subtotal, tax, shipping, total, item_count)
        """
        items = self.cart_repo.list_for_user(session, user_id)

        item_reads: list[CartItemRead] = []
        for it in items:
            product = self.product_repo.get_by_id(session, it.product_id)
            item_reads.append(to_cart_line(it, product))

        return CartSummary(items=item_reads, totals=calculate_totals(item_reads))

    def count_items(self, session: Session, user_id: uuid.UUID) -> CartCount:
        items = self.cart_repo.list_for_user(session, user_id)
        return CartCount(count=sum(it.quantity for it in items))

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be active
          - units already in cart (all variants) + quantity <= stock_on_hand
            for tracked products
          - snapshot is taken from the current product on first add
        """
        product = self._get_valid_product(session, payload.product_id)
        in_cart = self.cart_repo.list_for_product(session, user_id, payload.product_id)
        self._ensure_stock(product, sum(it.quantity for it in in_cart) + payload.quantity)

        existing = self.cart_repo.get_item(
            session, user_id, payload.product_id, payload.variant
        )
        if existing:
            existing.quantity += payload.quantity
            self.cart_repo.update(session, existing)
        else:
            self.cart_repo.create_from_product(
                session,
                user_id=user_id,
                product=product,
                quantity=payload.quantity,
                variant=payload.variant,
            )

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of one cart line.

        quantity == 0 removes the matching line(s). A nonzero quantity
        without a variant while the product sits on several variant lines
        => 400. Growing the product past stock_on_hand (all variants
        counted) => 400.
        """
        items = self.cart_repo.list_for_product(
            session, user_id, product_id, payload.variant
        )
        if not items:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        if payload.quantity == 0:
            self.cart_repo.delete_many(session, items)
            return self.get_cart_summary(session, user_id)

        if len(items) > 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product has several options in the cart; choose one to update",
            )
        item = items[0]

        current = sum(
            it.quantity
            for it in self.cart_repo.list_for_product(session, user_id, product_id)
        )
        requested = current - item.quantity + payload.quantity
        product = self.product_repo.get_by_id(session, product_id)
        if product and requested > current:
            self._ensure_stock(product, requested)

        item.quantity = payload.quantity
        self.cart_repo.update(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> CartSummary:
        """
        Remove a product (every variant unless one is given) from the cart,
        and return updated summary.
        """
        items = self.cart_repo.list_for_product(session, user_id, product_id, variant)
        if not items:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        self.cart_repo.delete_many(session, items)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], totals=calculate_totals([]))

    def get_shipping_options(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> list[ShippingOption]:
        summary = self.get_cart_summary(session, user_id)
        return shipping_options(summary.totals.subtotal)

    def quote_discount(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: DiscountRequest,
    ) -> DiscountQuote:
        """
        Quote a discount code against the cart subtotal.

        Unknown codes and unmet minimums => 400.
        """
        summary = self.get_cart_summary(session, user_id)
        try:
            return apply_discount(payload.code, summary.totals.subtotal)
        except DiscountError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            )
