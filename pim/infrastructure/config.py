"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://pim:pim_dev_password@db:5432/pim"

    # Search index
    search_url: str = "http://elasticsearch:9200"
    search_timeout: float = 10.0
    product_index_name: str = "pim_catalog_product"

    # Category tree: count products of the whole tree under each root
    # instead of those classified directly in the root.
    category_tree_count_sub_categories: bool = True

    # Authentication
    pim_api_key: str = "dev-api-key-change-in-production"

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
