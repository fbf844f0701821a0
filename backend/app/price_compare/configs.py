"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: list[str] = ["*"]
    PORT: int = 5000

    # Aggregation budgets
    SOURCE_TIMEOUT_SECONDS: float = 25.0
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    # Page rendering
    BROWSER_HEADLESS: bool = True
    BROWSER_MAX_SESSIONS: int = 4
    NAVIGATION_TIMEOUT_MS: int = 20000

    # Fallback catalog
    FALLBACK_CATALOG_URL: str = "https://dummyjson.com/products/search"
    FALLBACK_PRODUCT_URL: str = "https://dummyjson.com/products/"
    FALLBACK_TIMEOUT_SECONDS: float = 15.0
    FALLBACK_MAX_ITEMS: int = 2
    FALLBACK_CURRENCY_FACTOR: int = 80

    CURRENCY_SYMBOL: str = "₹"
    LOG_LEVEL: str = "INFO"

    # Repository root .env first, then one next to the app; later files win.
    model_config = SettingsConfigDict(env_file=("../../.env", ".env"), extra="ignore")


settings = Settings()
