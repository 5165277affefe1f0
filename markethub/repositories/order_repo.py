# markethub/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from markethub.models.order import Order, OrderItem


class OrderRepository:
    """
    Orders placed from account carts.

    Checkout spans several tables (order, lines, stock, cart), so nothing
    here commits; OrderService commits once the whole hand-off is staged.
    """

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """Newest first."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def get_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order | None:
        # Another shopper's order reads the same as a missing one
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        return session.exec(stmt).first()

    def lines_of(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id)
        return session.exec(stmt).all()

    def place(
        self,
        session: Session,
        order: Order,
        lines: list[OrderItem],
    ) -> tuple[Order, list[OrderItem]]:
        """
        Stage an order and its lines in the open transaction.

        Lines are attached to the order here, so callers build them without
        an order_id.
        """
        session.add(order)
        session.flush()
        for line in lines:
            line.order_id = order.id
        session.add_all(lines)
        session.flush()
        return order, lines
