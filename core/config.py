"""
Settings for the cart service, loaded from the environment (or a .env file).
"""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Inventory / catalog service
    INVENTORY_SERVICE_URL: str = "http://localhost:3333"
    INVENTORY_TIMEOUT_SECONDS: float = 5.0

    # Durable storage
    CART_STORAGE_BACKEND: Literal["sql", "memory"] = "sql"
    CART_STORAGE_KEY: str = "@RocketShoes:cart"
    DATABASE_URL: str = "sqlite:///./cart.db"

    # Run overlapping mutations one after another instead of last-writer-wins
    CART_SERIALIZE_MUTATIONS: bool = False

    RATE_LIMIT: str = "100/minute"

    ENVIRONMENT: str = "development"
    LOG_LEVEL: Optional[str] = None


settings = Settings()
