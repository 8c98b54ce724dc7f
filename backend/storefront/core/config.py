"""Centralized application settings using pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
# Look for .env in the backend directory or project root
env_path = Path(__file__).parent.parent.parent / ".env"
if not env_path.exists():
    # Try project root
    env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


class Settings(BaseSettings):
    """Environment-aware configuration (backend endpoints, paging, CORS)."""

    # Application settings
    app_name: str = "ChillYourBeans Storefront"
    log_level: str = "INFO"

    # Commerce backend settings
    magento_base_url: str = Field(
        default="http://127.0.0.1:8082",
        description="Site base URL, also used to resolve catalog media paths",
    )
    magento_api_url: str = Field(
        default="http://127.0.0.1:8082/api.php",
        description="Single JSON endpoint answering action=products|product|categories",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Transport timeout for backend requests",
    )

    # Storefront settings
    products_page_size: int = Field(default=12, ge=1, le=200)
    featured_category_id: int = 3
    featured_limit: int = Field(default=50, ge=1)
    placeholder_image: str = "/placeholder-product.jpg"

    # CORS settings - stored as string, converted to list via property
    cors_origins_raw: str | None = Field(
        default=None,
        validation_alias="CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins",
        exclude=True,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore",  # Ignore extra env vars not defined in model
        populate_by_name=True,  # Allow both field name and alias
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated string to list."""
        if self.cors_origins_raw is None or not self.cors_origins_raw.strip():
            return list(DEFAULT_CORS_ORIGINS)
        origins = [
            origin.strip().rstrip("/")
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
        return origins if origins else list(DEFAULT_CORS_ORIGINS)

    @field_validator("magento_base_url", "magento_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Media paths are appended with a leading slash, so drop the trailing one."""
        return v.strip().rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Provide singleton-like access for dependency injection."""
    return Settings()
