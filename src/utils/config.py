"""Configuration management for the application."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEMO_API_KEY = "demo"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class QuoteAPIConfig:
    """Remote quote source configuration."""

    api_key: str = DEMO_API_KEY
    base_url: str = "https://www.alphavantage.co/query"
    request_timeout: float = 10.0  # Seconds per HTTP request

    @property
    def is_demo_key(self) -> bool:
        return self.api_key == DEMO_API_KEY


@dataclass
class DatabaseConfig:
    """Database configuration."""

    database_url: str
    echo: bool = False


@dataclass
class WatchlistConfig:
    """Watchlist persistence configuration."""

    storage_key: str = "stock-analyzer-watchlist"


@dataclass
class LoggingConfig:
    """Structured logging configuration."""

    level: str = "INFO"
    file_path: str | None = None


class Config:
    """Main application configuration."""

    def __init__(self):
        self.quote_api = QuoteAPIConfig(
            api_key=os.getenv("ALPHA_VANTAGE_API_KEY") or DEMO_API_KEY,
            base_url=os.getenv("ALPHA_VANTAGE_BASE_URL", "https://www.alphavantage.co/query"),
            request_timeout=float(os.getenv("QUOTE_REQUEST_TIMEOUT", "10")),
        )

        self.database = DatabaseConfig(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./stock_viewer.db"),
            echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
        )

        self.watchlist = WatchlistConfig(
            storage_key=os.getenv("WATCHLIST_STORAGE_KEY", "stock-analyzer-watchlist"),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            file_path=os.getenv("LOG_FILE"),
        )

    def validate(self) -> bool:
        """
        Validate configuration.

        Returns:
            True if configuration is valid

        Raises:
            ValueError if configuration is invalid
        """
        if not self.quote_api.base_url:
            raise ValueError("ALPHA_VANTAGE_BASE_URL must not be empty")
        if self.quote_api.request_timeout <= 0:
            raise ValueError(
                f"Invalid QUOTE_REQUEST_TIMEOUT: {self.quote_api.request_timeout}. Must be positive"
            )
        if self.logging.level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.logging.level}. Use one of {', '.join(LOG_LEVELS)}"
            )
        if not self.watchlist.storage_key:
            raise ValueError("WATCHLIST_STORAGE_KEY must not be empty")

        return True


# Global config instance
config = Config()
