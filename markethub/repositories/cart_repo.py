# markethub/repositories/cart_repo.py
import uuid
from sqlmodel import Session, select
from markethub.models.cart import CartItem
from markethub.models.product import Product


class CartRepository:

    # Get items for a user, oldest first
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def list_for_product(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> list[CartItem]:
        """
        Lines of one product in a user's cart.

        `variant` narrows to that exact option set; None returns every
        variant of the product. JSON columns are compared in Python.
        """
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        rows = session.exec(stmt).all()
        if not variant:
            return list(rows)
        return [row for row in rows if (row.variant or None) == variant]

    def get_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> CartItem | None:
        """Return the single line keyed by (product_id, variant), if any."""
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        for row in session.exec(stmt).all():
            if (row.variant or None) == variant:
                return row
        return None

    # CRUD
    def update(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete_many(self, session: Session, items: list[CartItem]) -> None:
        for row in items:
            session.delete(row)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.commit()

    def create_from_product(
            self,
            session: Session,
            *,
            user_id: uuid.UUID,
            product: Product,
            quantity: int,
            variant: dict[str, str] | None = None,
    ) -> CartItem:
        """
        Create a CartItem from a Product, snapshotting:
          - snapshot_price
          - product_name
          - product_original_price
          - product_hero_image_url

        Business logic (stock checks, increments) lives in the service.
        """
        item = CartItem(
            user_id=user_id,
            product_id=product.id,
            quantity=quantity,
            variant=variant,
            snapshot_price=product.price,
            product_name=product.name,
            product_original_price=product.original_price,
            product_hero_image_url=product.hero_image_url,
        )
        session.add(item)
        session.commit()
        session.refresh(item)
        return item
