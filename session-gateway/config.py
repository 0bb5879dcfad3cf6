"""Configuration settings for Session Gateway."""
import os
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Gateway configuration settings loaded from environment variables."""

    def __init__(self) -> None:
        # Session token settings
        self.secret_key: Optional[str] = os.getenv("AUTH_SECRET") or None
        self.algorithm = "HS256"
        self.session_max_age = int(os.getenv("AUTH_SESSION_MAX_AGE", str(30 * 24 * 60 * 60)))

        # Cosmos DB settings (tenant memberships)
        self.cosmos_endpoint = os.getenv("COSMOS_ENDPOINT")
        self.cosmos_key = os.getenv("COSMOS_KEY")
        self.cosmos_db = os.getenv("COSMOS_DATABASE", "nile")
        self.cosmos_tenant_users_container = os.getenv("COSMOS_TENANT_USERS_CONTAINER", "tenant_users")

        # CORS settings
        origins = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000")
        self.cors_allow_origins: List[str] = [origin.strip() for origin in origins.split(",") if origin.strip()]

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()


# Global settings instance
settings = Settings()
