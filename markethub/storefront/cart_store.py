# markethub/storefront/cart_store.py
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from markethub.schemas.cart import CartTotals, DiscountQuote, LineItem, ShippingOption
from markethub.services import pricing
from markethub.services.discounts import DiscountError, apply_discount
from markethub.services.inventory import (
    CartFailure,
    availability_message,
    availability_problem,
)
from markethub.storefront import lines
from markethub.storefront.adapters import CartPersistenceAdapter, PersistenceError
from markethub.storefront.auth_state import AuthState, AuthStateProvider
from markethub.storefront.catalog import CatalogError, CatalogStore
from markethub.storefront.merge import MergeReport, merge_guest_cart
from markethub.storefront.views import CartLineView, format_line_item

logger = logging.getLogger(__name__)

RemoteAdapterFactory = Callable[[AuthState], CartPersistenceAdapter]


@dataclass
class CartResult:
    """
    Outcome of a cart operation.

    Expected refusals (bad quantity, stock, not found, backend down) come
    back as success=False with a reason; they are never raised.
    """

    success: bool
    reason: CartFailure | None = None
    message: str | None = None
    items: list[LineItem] = field(default_factory=list)
    discount: DiscountQuote | None = None

    @classmethod
    def ok(cls, items: list[LineItem], **kwargs: Any) -> "CartResult":
        return cls(success=True, items=list(items), **kwargs)

    @classmethod
    def fail(
        cls,
        reason: CartFailure,
        message: str | None,
        items: list[LineItem],
    ) -> "CartResult":
        return cls(success=False, reason=reason, message=message or reason.value, items=list(items))


def _is_quantity(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CartStore:
    """
    The shopper's cart.

    Holds the line items of one owner (guest device or account) and routes
    every change through the persistence adapter picked for the current
    authentication state: the local adapter for guests, a remote adapter
    for signed-in accounts. Totals are derived on demand, never stored.

    Usage:

        store = CartStore(catalog, local_adapter, remote_factory, auth)
        await store.initialize()
        result = await store.add_item(product, quantity=2)
    """

    def __init__(
        self,
        catalog: CatalogStore,
        local: CartPersistenceAdapter,
        remote_factory: RemoteAdapterFactory,
        auth: AuthStateProvider | None = None,
    ):
        self.catalog = catalog
        self._local = local
        self._remote_factory = remote_factory
        self._adapter: CartPersistenceAdapter = local
        self._items: list[LineItem] = []
        # True once _items reflects the active adapter
        self._loaded = False
        self.last_merge: MergeReport | None = None

        self._auth = auth
        if auth is not None:
            auth.subscribe(self._on_auth_change)

    # ---- state ----

    @property
    def items(self) -> list[LineItem]:
        return list(self._items)

    @property
    def is_remote(self) -> bool:
        return self._adapter is not self._local

    @property
    def item_count(self) -> int:
        return self.get_totals().item_count

    async def initialize(self) -> CartResult:
        """
        Pick the adapter for the current auth state and read the cart once.
        """
        if self._auth is not None and self._auth.state is not None:
            self._adapter = self._remote_factory(self._auth.state)
        return await self.reload()

    async def reload(self) -> CartResult:
        """Re-read the cart from the active adapter."""
        result = await self._persist(self._adapter.load())
        self._loaded = result.success
        return result

    async def _persist(self, operation: Awaitable[list[LineItem]]) -> CartResult:
        try:
            items = await operation
        except PersistenceError as e:
            logger.warning("Cart change not saved: %s", e)
            return CartResult.fail(CartFailure.PERSISTENCE_FAILED, str(e), self._items)
        self._items = list(items)
        return CartResult.ok(self._items)

    # ---- mutations ----

    async def add_item(
        self,
        product: Any,
        quantity: int = 1,
        variant: dict[str, str] | None = None,
    ) -> CartResult:
        """
        Add `quantity` units of `product` (any object with an `id`).

        The product is re-read from the catalog; that record is the snapshot
        stored on a new line. Adding a (product, variant) pair already in
        the cart increments that line.
        """
        if not _is_quantity(quantity) or quantity < 1:
            return CartResult.fail(
                CartFailure.INVALID_QUANTITY, "Quantity must be at least 1", self._items
            )

        product_id = getattr(product, "id", None)
        if product_id is None:
            return CartResult.fail(
                CartFailure.MISSING_PRODUCT_ID, "Product id is required", self._items
            )

        try:
            current = await self.catalog.get_product(product_id)
        except CatalogError as e:
            logger.warning("Catalog lookup for %s failed: %s", product_id, e)
            return CartResult.fail(CartFailure.PRODUCT_UNAVAILABLE, str(e), self._items)

        if current is None:
            return CartResult.fail(
                CartFailure.PRODUCT_UNAVAILABLE, "Product not found", self._items
            )

        requested = lines.product_quantity(self._items, product_id) + quantity
        problem = availability_problem(current, requested)
        if problem is not None:
            return CartResult.fail(problem, availability_message(current, problem), self._items)

        line = LineItem(product=current, quantity=quantity, variant=variant)
        return await self._persist(self._adapter.add(self._items, line))

    async def update_quantity(
        self,
        product_id: uuid.UUID,
        new_quantity: int,
        variant: dict[str, str] | None = None,
    ) -> CartResult:
        """
        Set the quantity of one line; <= 0 removes the matching line(s).

        Without a variant the product must sit on a single line; with
        several variant lines the caller has to say which one.
        Raising a quantity is checked against the line's snapshot stock.
        """
        if not _is_quantity(new_quantity):
            return CartResult.fail(
                CartFailure.INVALID_QUANTITY, "Quantity must be a whole number", self._items
            )
        if new_quantity <= 0:
            return await self.remove_item(product_id, variant)

        targets = lines.find_lines(self._items, product_id, variant)
        if not targets:
            return CartResult.fail(CartFailure.ITEM_NOT_FOUND, "Item not found in cart", self._items)
        if len(targets) > 1:
            return CartResult.fail(
                CartFailure.VARIANT_REQUIRED,
                "Product has several options in the cart; choose one to update",
                self._items,
            )

        (target,) = targets
        current_total = lines.product_quantity(self._items, product_id)
        requested = current_total - target.quantity + new_quantity
        if requested > current_total:
            snapshot = target.product
            problem = availability_problem(snapshot, requested)
            if problem is not None:
                return CartResult.fail(
                    problem, availability_message(snapshot, problem), self._items
                )

        return await self._persist(
            self._adapter.update(self._items, product_id, new_quantity, variant)
        )

    async def remove_item(
        self,
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> CartResult:
        if not lines.find_lines(self._items, product_id, variant):
            return CartResult.fail(CartFailure.ITEM_NOT_FOUND, "Item not found in cart", self._items)
        return await self._persist(self._adapter.remove(self._items, product_id, variant))

    async def clear(self) -> CartResult:
        return await self._persist(self._adapter.clear(self._items))

    # ---- reads ----

    def get_totals(self) -> CartTotals:
        return pricing.calculate_totals(self._items)

    def is_in_cart(self, product_id: uuid.UUID, variant: dict[str, str] | None = None) -> bool:
        return bool(lines.find_lines(self._items, product_id, variant))

    def get_item_quantity(
        self,
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> int:
        return sum(it.quantity for it in lines.find_lines(self._items, product_id, variant))

    def line_views(self) -> list[CartLineView]:
        return [format_line_item(it) for it in self._items]

    def shipping_options(self) -> list[ShippingOption]:
        return pricing.shipping_options(self.get_totals().subtotal)

    def apply_discount(self, code: str) -> CartResult:
        """Quote `code` against the current subtotal without changing the cart."""
        try:
            quote = apply_discount(code, self.get_totals().subtotal)
        except DiscountError as e:
            return CartResult.fail(CartFailure.INVALID_DISCOUNT, str(e), self._items)
        return CartResult.ok(self._items, discount=quote)

    # ---- authentication transitions ----

    async def _read_guest_cart(self) -> list[LineItem]:
        """Device cart for a login that arrives before the store was loaded."""
        try:
            return await self._local.load()
        except PersistenceError as e:
            logger.warning("Guest cart could not be read for merge: %s", e)
            return []

    async def _on_auth_change(self, state: AuthState | None) -> None:
        if state is None:
            self._adapter = self._local
            self._loaded = False
            self.last_merge = None
            result = await self.reload()
            if not result.success:
                self._items = []
            return

        if self.is_remote:
            guest_items = []
        elif self._loaded:
            guest_items = list(self._items)
        else:
            guest_items = await self._read_guest_cart()

        remote = self._remote_factory(state)
        self._adapter = remote
        self._loaded = False
        self.last_merge = None

        if guest_items:
            self.last_merge = await merge_guest_cart(guest_items, remote, self._local)

        result = await self.reload()
        if not result.success:
            # Never present the guest lines as the account's cart
            merged = self.last_merge.items if self.last_merge else None
            self._items = list(merged) if merged is not None else []
