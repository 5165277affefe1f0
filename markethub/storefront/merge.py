# markethub/storefront/merge.py
import logging
import uuid
from dataclasses import dataclass, field
from typing import Sequence

from markethub.schemas.cart import LineItem
from markethub.storefront.adapters import CartPersistenceAdapter, PersistenceError

logger = logging.getLogger(__name__)


@dataclass
class MergeFailure:
    product_id: uuid.UUID
    quantity: int
    message: str


@dataclass
class MergeReport:
    """
    Outcome of folding a guest cart into an account cart.

    `items` is the account cart as returned by the last accepted
    submission, or None when nothing was accepted.
    """

    merged: list[uuid.UUID] = field(default_factory=list)
    failed: list[MergeFailure] = field(default_factory=list)
    items: list[LineItem] | None = None

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def partial(self) -> bool:
        return bool(self.failed) and bool(self.merged)


async def merge_guest_cart(
    guest_items: Sequence[LineItem],
    remote: CartPersistenceAdapter,
    local: CartPersistenceAdapter,
) -> MergeReport:
    """
    Submit every guest line to the account cart, then wipe the guest cart.

    Lines go out one at a time in insertion order; the account cart's own
    increment rule sums lines it already holds. A rejected line is recorded
    and the rest still go out. Nothing is rolled back, and the guest cart is
    cleared whatever happened.
    """
    report = MergeReport()

    for line in guest_items:
        try:
            report.items = await remote.add(report.items or [], line)
        except PersistenceError as e:
            logger.warning(
                "Guest cart line %s x%d not merged: %s", line.product_id, line.quantity, e
            )
            report.failed.append(
                MergeFailure(product_id=line.product_id, quantity=line.quantity, message=str(e))
            )
        else:
            report.merged.append(line.product_id)

    try:
        await local.clear(list(guest_items))
    except PersistenceError:
        logger.exception("Guest cart could not be cleared after merge")

    if report.failed:
        logger.warning(
            "Guest cart merge finished with %d of %d lines rejected",
            len(report.failed),
            len(guest_items),
        )
    return report
