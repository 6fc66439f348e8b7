"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, with no scattered magic strings.
"""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        database_url: SQLAlchemy URL of the account store.
        starting_balance: Virtual cash credited to every new account.
        ledger_max_retries: Attempts per order before giving up on a
            concurrently modified account.
        user_id_header: Header carrying the caller identity resolved
            by the upstream gateway.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Virtual Trader"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"

    database_url: str = "sqlite:///./virtual_trader.db"
    starting_balance: Decimal = Decimal("100000.00")
    ledger_max_retries: int = 3
    user_id_header: str = "X-User-Id"


settings = Settings()
