from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os


class Settings(BaseSettings):
    APP_NAME: str = "Discount Provisioner"
    DEBUG: bool = True

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:8765", "http://127.0.0.1:8765"]

    HOST: str = "127.0.0.1"
    PORT: int = 8765

    # Shopify Admin API (request headers take precedence over these)
    SHOPIFY_SHOP_DOMAIN: str = os.getenv("SHOPIFY_SHOP_DOMAIN", "")
    SHOPIFY_ACCESS_TOKEN: str = os.getenv("SHOPIFY_ACCESS_TOKEN", "")
    SHOPIFY_API_VERSION: str = "2025-07"
    SHOPIFY_REQUEST_TIMEOUT: int = 30  # seconds, applied by the Shopify client only

    # Where the discount function reads its configuration from
    DISCOUNT_METAFIELD_NAMESPACE: str = "$app:example-discounts--ui-extension"
    DISCOUNT_METAFIELD_KEY: str = "function-configuration"

    # Bulk creation
    BULK_MAX_QUANTITY: int = 0  # 0 = no limit
    BULK_MAX_WORKERS: int = 1  # 1 = strictly sequential

    # When enabled, unparseable numeric configuration is rejected locally instead of sent as NaN
    STRICT_CONFIGURATION_PARSING: bool = False
    # When enabled, bulk responses carry a per-code report next to the aggregate outcome
    INCLUDE_BULK_ITEM_REPORT: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"  # Ignore extra environment variables
    )


settings = Settings()
