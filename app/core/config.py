# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (shared with whatever issues customer tokens)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - DB_REQUIRE_SSL (append sslmode=require for hosted Postgres)
      - MOCK_PAYMENT_SUCCESS_RATE (0.0 - 1.0, used by the mock gateway)
      - SEED_SAMPLE_DATA (insert demo catalog on first startup)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    # DB config
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DB_REQUIRE_SSL: bool = False
    DB_ECHO: bool = False

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    # Checkout pricing
    TAX_RATE: float = 0.08
    FLAT_SHIPPING_FEE: float = 10.0
    FREE_SHIPPING_THRESHOLD: float = 100.0
    CURRENCY: str = "USD"

    # Mock payment gateway
    MOCK_PAYMENT_SUCCESS_RATE: float = 0.9

    SEED_SAMPLE_DATA: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
