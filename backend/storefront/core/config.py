"""
Application configuration

Settings are read from the environment (or a local .env file) once at
import time. Payment gateway credentials are exposed as an explicit
GatewayConfig object so connectors never read the environment themselves.
"""
import json
from dataclasses import dataclass
from typing import List, Optional

from pydantic_settings import BaseSettings


@dataclass(frozen=True)
class GatewayConfig:
    """Braintree credentials handed to BraintreeConnector at construction"""
    merchant_id: str
    public_key: str
    private_key: str
    environment: str = "sandbox"


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "Storefront API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Catalog management and checkout backend"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = ""

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    # Auth
    AUTH_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    # Braintree
    BRAINTREE_MERCHANT_ID: str = ""
    BRAINTREE_PUBLIC_KEY: str = ""
    BRAINTREE_PRIVATE_KEY: str = ""
    BRAINTREE_ENVIRONMENT: str = "sandbox"

    # Product photos
    PHOTO_MAX_BYTES: int = 1_000_000
    PHOTO_REQUIRED: bool = False

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

    def get_gateway_config(self) -> GatewayConfig:
        return GatewayConfig(
            merchant_id=self.BRAINTREE_MERCHANT_ID,
            public_key=self.BRAINTREE_PUBLIC_KEY,
            private_key=self.BRAINTREE_PRIVATE_KEY,
            environment=self.BRAINTREE_ENVIRONMENT,
        )

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
