# markethub/storefront/catalog.py
import uuid
from typing import Protocol

import httpx
from pydantic import ValidationError

from markethub.schemas.cart import ProductSnapshot
from markethub.schemas.product import ProductRead, snapshot_of


class CatalogError(Exception):
    """The catalog could not be asked about a product."""


class CatalogStore(Protocol):
    async def get_product(self, product_id: uuid.UUID) -> ProductSnapshot | None: ...


class HttpCatalog:
    """
    Catalog Store backed by the MarketHub API.

    Returns None for unknown products; transport and server failures
    raise CatalogError.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def get_product(self, product_id: uuid.UUID) -> ProductSnapshot | None:
        try:
            response = await self.client.get(f"/products/{product_id}")
        except httpx.HTTPError as e:
            raise CatalogError(f"Catalog unreachable: {e}") from e

        if response.status_code == 404:
            return None
        if response.is_error:
            raise CatalogError(f"Catalog lookup failed ({response.status_code})")

        try:
            return snapshot_of(ProductRead.model_validate(response.json()))
        except (ValueError, ValidationError) as e:
            raise CatalogError("Catalog sent an unreadable product") from e
