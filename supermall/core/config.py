"""
Centralized application settings
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, loaded from environment and .env"""

    # API Settings
    API_TITLE: str = "SuperMall API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Storefront API for SuperMall shops, products and offers"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False

    # Database
    DATABASE_URL: str = ""
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""
    STORAGE_BUCKET: str = "supermall-media"

    # Public URL used when building share links
    PUBLIC_APP_URL: str = "http://localhost:3000"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "DEBUG"
    LOG_JSON: bool = True

    # Listing defaults
    PRODUCT_PAGE_SIZE: int = 24
    SHOP_PAGE_SIZE: int = 20
    OFFER_PAGE_SIZE: int = 20
    FUZZY_THRESHOLD: float = 0.3

    # Limits
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    MAX_COMPARE_PRODUCTS: int = 5
    TWO_FACTOR_TTL_MINUTES: int = 10

    # Rate limiting (requests per window)
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_AUTHENTICATED: int = 600
    RATE_LIMIT_ANONYMOUS: int = 120

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
