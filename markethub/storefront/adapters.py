# markethub/storefront/adapters.py
"""
Where a cart lives.

Two interchangeable backends behind one async interface:

  - LocalCartAdapter : guest cart, JSON in device storage under a fixed key
  - RemoteCartAdapter: account cart, held by the MarketHub API

Every mutation receives the caller's current items and returns the new
authoritative list, or raises PersistenceError. Callers only adopt the
returned list, so a failure never leaves half-applied state in memory.
"""
import json
import logging
import uuid
from typing import Any, Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from markethub.schemas.cart import CartSummary, LineItem
from markethub.storefront import lines
from markethub.storefront.storage import LocalStorage

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[LineItem])


class PersistenceError(Exception):
    """A cart backend could not apply a change or return the cart."""


class CartPersistenceAdapter(Protocol):
    async def load(self) -> list[LineItem]: ...

    async def add(self, items: list[LineItem], line: LineItem) -> list[LineItem]: ...

    async def update(
        self,
        items: list[LineItem],
        product_id: uuid.UUID,
        quantity: int,
        variant: dict[str, str] | None = None,
    ) -> list[LineItem]: ...

    async def remove(
        self,
        items: list[LineItem],
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> list[LineItem]: ...

    async def clear(self, items: list[LineItem]) -> list[LineItem]: ...


class LocalCartAdapter:
    """
    Guest cart kept in device storage.

    Read once when the store initializes; rewritten after every mutation.
    """

    def __init__(self, storage: LocalStorage, key: str = "cart"):
        self.storage = storage
        self.key = key

    async def load(self) -> list[LineItem]:
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                return []
            return _items_adapter.validate_json(raw)
        except OSError as e:
            raise PersistenceError(f"Could not read the saved cart: {e}") from e
        except (UnicodeDecodeError, ValidationError):
            logger.exception("Discarding unreadable cart stored under %r", self.key)
            return []

    def _save(self, items: list[LineItem]) -> list[LineItem]:
        try:
            self.storage.set_item(self.key, _items_adapter.dump_json(items).decode())
        except OSError as e:
            raise PersistenceError(f"Could not save the cart: {e}") from e
        return items

    async def add(self, items: list[LineItem], line: LineItem) -> list[LineItem]:
        return self._save(lines.add_line(items, line))

    async def update(
        self,
        items: list[LineItem],
        product_id: uuid.UUID,
        quantity: int,
        variant: dict[str, str] | None = None,
    ) -> list[LineItem]:
        return self._save(lines.set_quantity(items, product_id, quantity, variant))

    async def remove(
        self,
        items: list[LineItem],
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> list[LineItem]:
        return self._save(lines.remove_lines(items, product_id, variant))

    async def clear(self, items: list[LineItem]) -> list[LineItem]:
        try:
            self.storage.remove_item(self.key)
        except OSError as e:
            raise PersistenceError(f"Could not clear the saved cart: {e}") from e
        return []


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    if isinstance(detail, str):
        return detail
    return f"Cart service returned {response.status_code}"


class RemoteCartAdapter:
    """
    Account cart held by the MarketHub API.

    Each mutation is a single request; the full cart in the response
    replaces whatever the caller had. `items` arguments are ignored.
    """

    def __init__(self, client: httpx.AsyncClient, access_token: str):
        self.client = client
        self._headers = {"Authorization": f"Bearer {access_token}"}

    async def _send(self, method: str, url: str, **kwargs: Any) -> list[LineItem]:
        try:
            response = await self.client.request(method, url, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            raise PersistenceError(f"Cart service unreachable: {e}") from e

        if response.is_error:
            raise PersistenceError(_error_detail(response))

        try:
            summary = CartSummary.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise PersistenceError("Cart service sent an unreadable cart") from e

        return [
            LineItem(
                product=it.product,
                quantity=it.quantity,
                variant=it.variant,
                added_at=it.added_at,
            )
            for it in summary.items
        ]

    async def load(self) -> list[LineItem]:
        return await self._send("GET", "/cart")

    async def add(self, items: list[LineItem], line: LineItem) -> list[LineItem]:
        return await self._send(
            "POST",
            "/cart",
            json={
                "product_id": str(line.product_id),
                "quantity": line.quantity,
                "variant": line.variant,
            },
        )

    async def update(
        self,
        items: list[LineItem],
        product_id: uuid.UUID,
        quantity: int,
        variant: dict[str, str] | None = None,
    ) -> list[LineItem]:
        return await self._send(
            "PATCH",
            f"/cart/{product_id}",
            json={"quantity": quantity, "variant": variant},
        )

    async def remove(
        self,
        items: list[LineItem],
        product_id: uuid.UUID,
        variant: dict[str, str] | None = None,
    ) -> list[LineItem]:
        params = {"variant": json.dumps(variant)} if variant else None
        return await self._send("DELETE", f"/cart/{product_id}", params=params)

    async def clear(self, items: list[LineItem]) -> list[LineItem]:
        return await self._send("DELETE", "/cart")
