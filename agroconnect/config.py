"""Configuration management."""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class AuthConfig:
    """Authentication provider configuration."""

    api_url: str = os.getenv("AUTH_API_URL", "")
    api_key: str = os.getenv("AUTH_API_KEY", "")
    timeout: int = int(os.getenv("AUTH_TIMEOUT", "10"))

    @property
    def user_endpoint(self) -> str:
        """URL of the provider's "current user" endpoint."""
        return f"{self.api_url.rstrip('/')}/auth/v1/user"

    @property
    def is_configured(self) -> bool:
        """Check if the auth provider is properly configured."""
        return bool(self.api_url and self.api_key)


@dataclass
class MarketplaceConfig:
    """General marketplace configuration."""

    database_path: str = os.getenv("DATABASE_PATH", "data/agroconnect.db")
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))
    related_products_limit: int = 4
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "false").lower() == "true"


auth_config = AuthConfig()
marketplace_config = MarketplaceConfig()
