"""
Square API Configuration

Manages configuration settings for the Square client including
authentication, environment selection, API version and timeouts.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


SANDBOX_BASE_URL = "https://connect.squareupsandbox.com"
PRODUCTION_BASE_URL = "https://connect.squareup.com"
DEFAULT_SQUARE_VERSION = "2024-12-18"
DEFAULT_TIMEOUT = 30.0


class SquareEnvironment(Enum):
    """Square API environment options"""
    SANDBOX = "sandbox"
    PRODUCTION = "production"


class SquareSettings(BaseSettings):
    # Reads SQUARE_* variables, falling back to a .env file in the working directory
    model_config = SettingsConfigDict(env_prefix="SQUARE_", env_file=".env",
                                      env_file_encoding="utf-8", extra="ignore")
    ACCESS_TOKEN: Optional[str] = None
    ENVIRONMENT: str = "sandbox"
    BASE_URL: Optional[str] = None
    VERSION: str = DEFAULT_SQUARE_VERSION
    TIMEOUT: float = DEFAULT_TIMEOUT
    LOCATION_ID: Optional[str] = None
    LOG_LEVEL: str = "INFO"


@dataclass(frozen=True)
class SquareConfig:
    """Immutable configuration for a SquareClient"""

    access_token: str
    environment: SquareEnvironment = SquareEnvironment.SANDBOX
    base_url_override: Optional[str] = None
    square_version: str = DEFAULT_SQUARE_VERSION
    timeout: float = DEFAULT_TIMEOUT
    location_id: Optional[str] = None

    @property
    def base_url(self) -> str:
        """Get the base URL for the current environment"""
        if self.base_url_override:
            return self.base_url_override.rstrip("/")
        if self.environment == SquareEnvironment.SANDBOX:
            return SANDBOX_BASE_URL
        return PRODUCTION_BASE_URL

    @property
    def headers(self) -> dict:
        """Get standard headers for Square API requests"""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self.access_token}",
            "Square-Version": self.square_version,
        }

    def production(self) -> 'SquareConfig':
        """Copy of this configuration pointed at the production environment"""
        return replace(self, environment=SquareEnvironment.PRODUCTION)

    @classmethod
    def from_env(cls) -> 'SquareConfig':
        """Create configuration from SQUARE_* environment variables (and .env)"""
        load_dotenv()
        settings = SquareSettings()
        if not settings.ACCESS_TOKEN:
            raise ConfigError("SQUARE_ACCESS_TOKEN environment variable is required")

        env_str = settings.ENVIRONMENT.lower()
        if env_str not in ("sandbox", "production"):
            raise ConfigError(f"Unknown SQUARE_ENVIRONMENT: {settings.ENVIRONMENT}")

        config = cls(
            access_token=settings.ACCESS_TOKEN,
            environment=SquareEnvironment(env_str),
            base_url_override=settings.BASE_URL,
            square_version=settings.VERSION,
            timeout=settings.TIMEOUT,
            location_id=settings.LOCATION_ID,
        )
        config.validate()
        return config

    def validate(self) -> bool:
        """Validate that required configuration is present"""
        if not isinstance(self.access_token, str) or not self.access_token.strip():
            raise ConfigError("Access token is required")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError("Timeout must be a positive number of seconds")
        if not self.square_version:
            raise ConfigError("Square-Version header value is required")
        return True
