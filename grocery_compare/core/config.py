"""
Application configuration.

Settings are loaded from environment variables (or a .env file) and exposed
through the module-level ``settings`` instance.
"""

from decimal import Decimal
from typing import List, Literal
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = Field(default="Grocery Compare API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(default="development", description="Deployment environment")
    DEBUG: bool = Field(default=False, description="Expose error details in responses")

    # Server
    HOST: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    PORT: int = Field(default=8000, description="Bind port for uvicorn")
    RELOAD: bool = Field(default=False, description="Enable uvicorn auto-reload")

    # Database
    DATABASE_URL: str = Field(
        default="sqlite:///./grocery_compare.db", description="SQLAlchemy database URL"
    )
    DATABASE_ECHO: bool = Field(default=False, description="Echo SQL queries (for debugging)")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="logging.basicConfig format string",
    )

    # Comparison engine
    SAVINGS_POLICY: Literal["average", "sale"] = Field(
        default="average",
        description="'average' = savings below the cross-store mean, 'sale' = flat rate on sale items",
    )
    SALE_SAVINGS_RATE: Decimal = Field(
        default=Decimal("0.10"), ge=0, le=1, description="Share of sale-item spend counted as savings"
    )
    STORE_LOOKUP_TIMEOUT_SECONDS: float = Field(
        default=5.0, gt=0, description="Per-store pricing timeout before the store is dropped"
    )
    DEFAULT_MAX_DISTANCE: Decimal = Field(
        default=Decimal("10"), ge=0, description="Max distance (miles) used by stored-list comparisons"
    )

    # Demo session (authentication is handled outside this service)
    DEMO_USER_ID: int = Field(default=1, description="User id assumed for list and alert endpoints")

    SEED_SAMPLE_DATA: bool = Field(default=False, description="Seed sample stores and prices on startup")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def app_name(self) -> str:
        return self.APP_NAME

    @property
    def app_version(self) -> str:
        return self.APP_VERSION

    @property
    def debug(self) -> bool:
        return self.DEBUG

    @property
    def host(self) -> str:
        return self.HOST

    @property
    def port(self) -> int:
        return self.PORT

    @property
    def reload(self) -> bool:
        return self.RELOAD

    @property
    def log_format(self) -> str:
        return self.LOG_FORMAT

    @property
    def cors_origins(self) -> List[str]:
        return self.CORS_ORIGINS

    @property
    def cors_allow_credentials(self) -> bool:
        return self.CORS_ALLOW_CREDENTIALS


# Global settings instance
settings = Settings()
