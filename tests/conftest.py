"""Shared pytest fixtures: in-memory database, API clients and cart fakes."""
import os
import uuid

# Settings are read at import time; provide them before markethub loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session, SQLModel

from markethub.core.config import ClientSettings, get_settings
from markethub.database import engine, get_session
from markethub.main import app
from markethub.models.product import Product
from markethub.models.user import ADMIN_ROLE, User
from markethub.repositories.product_repo import ProductRepository
from markethub.repositories.user_repo import UserRepository
from markethub.schemas.cart import LineItem, ProductSnapshot
from markethub.storefront.adapters import LocalCartAdapter, PersistenceError
from markethub.storefront.catalog import CatalogError
from markethub.storefront.storage import LocalStorage


@pytest.fixture()
def session():
    """Fresh schema per test; every request in the test shares this session."""
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        app.dependency_overrides[get_session] = lambda: session
        yield session
    app.dependency_overrides.clear()
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def make_product(session: Session):
    repo = ProductRepository()

    def _make(
        name: str = "Linen Shirt",
        price: float = 20.0,
        stock: int = 10,
        *,
        status: str = "active",
        track_inventory: bool = True,
        original_price: float | None = None,
    ) -> Product:
        return repo.create(
            session,
            Product(
                name=name,
                slug=f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
                price=price,
                original_price=original_price,
                stock_on_hand=stock,
                track_inventory=track_inventory,
                status=status,
            ),
        )

    return _make


def mint_token(account_id: uuid.UUID, email: str) -> str:
    settings = get_settings()
    return jwt.encode(
        {"sub": str(account_id), "email": email},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALG,
    )


@pytest.fixture()
def customer_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture()
def customer_token(customer_id: uuid.UUID) -> str:
    return mint_token(customer_id, "shopper@markethub.io")


@pytest.fixture()
def auth_headers(customer_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {customer_token}"}


@pytest.fixture()
def admin_headers(session: Session) -> dict[str, str]:
    admin = UserRepository().create(
        session,
        User(id=uuid.uuid4(), email="admin@markethub.io", name="admin", role=ADMIN_ROLE),
    )
    return {"Authorization": f"Bearer {mint_token(admin.id, admin.email)}"}


@pytest.fixture()
def test_client(session: Session) -> TestClient:
    return TestClient(app)


@pytest.fixture()
async def api_client(session: Session):
    """httpx client talking to the app in-process, rooted at the API prefix."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api/v1") as client:
        yield client


@pytest.fixture()
def client_settings(tmp_path) -> ClientSettings:
    return ClientSettings(
        API_BASE_URL="http://test/api/v1",
        LOCAL_STORAGE_DIR=str(tmp_path / "device"),
        LOCAL_CART_KEY="cart",
    )


@pytest.fixture()
def storage(client_settings: ClientSettings) -> LocalStorage:
    return LocalStorage(client_settings.LOCAL_STORAGE_DIR)


@pytest.fixture()
def local_adapter(storage: LocalStorage) -> LocalCartAdapter:
    return LocalCartAdapter(storage)


def snapshot(
    name: str = "Canvas Tote",
    price: float = 10.0,
    stock: int = 5,
    *,
    status: str = "active",
    track_inventory: bool = True,
    original_price: float | None = None,
) -> ProductSnapshot:
    return ProductSnapshot(
        id=uuid.uuid4(),
        name=name,
        price=price,
        original_price=original_price,
        stock=stock,
        track_inventory=track_inventory,
        status=status,
    )


class FakeCatalog:
    """In-memory catalog; set `unreachable` to simulate a dead service."""

    def __init__(self, *products: ProductSnapshot):
        self.products = {p.id: p for p in products}
        self.unreachable = False

    def put(self, product: ProductSnapshot) -> ProductSnapshot:
        self.products[product.id] = product
        return product

    async def get_product(self, product_id: uuid.UUID) -> ProductSnapshot | None:
        if self.unreachable:
            raise CatalogError("catalog down")
        return self.products.get(product_id)


class FlakyCartAdapter(LocalCartAdapter):
    """Cart adapter that can be told to reject writes."""

    def __init__(self, storage: LocalStorage, key: str = "cart"):
        super().__init__(storage, key)
        self.failing = False

    def _save(self, items: list[LineItem]) -> list[LineItem]:
        if self.failing:
            raise PersistenceError("backend unavailable")
        return super()._save(items)

    async def clear(self, items: list[LineItem]) -> list[LineItem]:
        if self.failing:
            raise PersistenceError("backend unavailable")
        return await super().clear(items)


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog()
