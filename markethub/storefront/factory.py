# markethub/storefront/factory.py
import httpx

from markethub.core.config import ClientSettings, get_client_settings
from markethub.storefront.adapters import LocalCartAdapter, RemoteCartAdapter
from markethub.storefront.auth_state import AuthState, AuthStateProvider
from markethub.storefront.cart_store import CartStore
from markethub.storefront.catalog import HttpCatalog
from markethub.storefront.storage import LocalStorage


def create_http_client(settings: ClientSettings | None = None) -> httpx.AsyncClient:
    settings = settings or get_client_settings()
    return httpx.AsyncClient(base_url=settings.API_BASE_URL, timeout=10.0)


def create_cart_store(
    auth: AuthStateProvider,
    http_client: httpx.AsyncClient,
    settings: ClientSettings | None = None,
) -> CartStore:
    """
    Wire a CartStore to device storage and the MarketHub API.

    Call `await store.initialize()` before use.
    """
    settings = settings or get_client_settings()

    local = LocalCartAdapter(
        LocalStorage(settings.LOCAL_STORAGE_DIR),
        key=settings.LOCAL_CART_KEY,
    )

    def remote_factory(state: AuthState) -> RemoteCartAdapter:
        return RemoteCartAdapter(http_client, state.access_token)

    return CartStore(
        catalog=HttpCatalog(http_client),
        local=local,
        remote_factory=remote_factory,
        auth=auth,
    )
