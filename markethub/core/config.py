# markethub/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - JWT_SECRET (HS256 secret shared with the auth service that issues tokens)
    """

    PROJECT_NAME: str = "MarketHub API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side only; tokens are issued elsewhere)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class ClientSettings(BaseSettings):
    """
    Settings for the storefront cart running on the customer's device.

    Optional env vars:
      - API_BASE_URL: where the account cart service lives
      - LOCAL_STORAGE_DIR: directory used as device storage for guest carts
      - LOCAL_CART_KEY: storage key holding the guest cart
    """

    API_BASE_URL: str = "http://localhost:8000/api/v1"
    LOCAL_STORAGE_DIR: str = ".markethub"
    LOCAL_CART_KEY: str = "cart"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
