"""Application settings loaded from environment variables."""

import os
import re
from enum import Enum
from typing import Any

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment, selects the logging defaults."""

    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


# Logging defaults per environment, used unless set explicitly
ENVIRONMENT_DEFAULTS: dict[Environment, dict[str, str]] = {
    Environment.DEV: {"LOG_CONSOLE_FORMAT": "human", "LOG_LEVEL": "DEBUG"},
    Environment.STAGING: {"LOG_CONSOLE_FORMAT": "json", "LOG_LEVEL": "INFO"},
    Environment.PRODUCTION: {
        "LOG_CONSOLE_FORMAT": "json",
        "LOG_LEVEL": "WARNING",
    },
}


class Settings(BaseSettings):  # type: ignore[misc]
    """
    Catalog service configuration.

    Every field is read from the environment variable of the same
    (case-sensitive) name. The Keycloak realm, client and admin
    credentials have no defaults and must be provided.
    """

    model_config = SettingsConfigDict(case_sensitive=True)

    # Environment configuration
    ENV: Environment = Environment.DEV

    # Database settings
    DB_USER: str = "catalog"
    DB_PASSWORD: SecretStr = SecretStr("catalog")
    DB_HOST: str = "book-catalog-db"
    DB_PORT: int = 5432
    DB_NAME: str = "book_catalog"
    # Full SQLAlchemy URL, takes precedence over the DB_* parts above
    DB_URL: str | None = None
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    DB_INIT_RETRY_INTERVAL: int = 2
    DB_INIT_MAX_RETRIES: int = 5

    # Keycloak settings
    KEYCLOAK_REALM: str
    KEYCLOAK_CLIENT_ID: str
    KEYCLOAK_BASE_URL: str = "http://catalog-keycloak:8080/"
    KEYCLOAK_ADMIN_USERNAME: str
    KEYCLOAK_ADMIN_PASSWORD: SecretStr

    # Logging settings
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_FORMAT: str = "human"

    # Paths served without a bearer token
    EXCLUDED_PATHS: re.Pattern[str] = re.compile(
        r"^(/docs|/openapi.json|/health|/login|/register)$"
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._apply_environment_defaults()

    def _apply_environment_defaults(self) -> None:
        """
        Fill in the logging options the environment did not set.

        Development logs everything in readable form; staging and production
        log JSON lines, production only from WARNING up.
        """
        for name, value in ENVIRONMENT_DEFAULTS[self.ENV].items():
            if os.getenv(name) is None:
                setattr(self, name, value)

    @property
    def DATABASE_URL(self) -> str:
        """SQLAlchemy async connection URL."""
        if self.DB_URL:
            return self.DB_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:"
            f"{self.DB_PASSWORD.get_secret_value()}@"
            f"{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


app_settings = Settings()
