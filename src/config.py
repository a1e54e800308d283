# ABOUTME: Environment-driven settings shared by the backend server and the terminal client.
# ABOUTME: Loads .env via python-dotenv and exposes a pydantic Settings model plus logging setup.

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_RECENT_SEARCHES_PATH = Path.home() / ".api_dashboard" / "recent_searches.json"


class Settings(BaseModel):
    """Runtime configuration, read once from the environment."""

    weather_api_key: str = ""
    exchange_api_key: str = ""
    default_city: str = "Hyderabad"
    base_currency: str = "INR"
    upstream_timeout: float = 5.0
    port: int = 3001
    api_base_url: str = "http://localhost:3001"
    recent_searches_path: Path = DEFAULT_RECENT_SEARCHES_PATH
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults for unset ones."""
        env = {
            "weather_api_key": os.environ.get("WEATHER_API_KEY"),
            "exchange_api_key": os.environ.get("EXCHANGE_API_KEY"),
            "default_city": os.environ.get("DEFAULT_CITY"),
            "base_currency": os.environ.get("BASE_CURRENCY"),
            "upstream_timeout": os.environ.get("UPSTREAM_TIMEOUT"),
            "port": os.environ.get("PORT"),
            "api_base_url": os.environ.get("API_BASE_URL"),
            "recent_searches_path": os.environ.get("RECENT_SEARCHES_PATH"),
            "log_level": os.environ.get("LOG_LEVEL"),
        }
        return cls(**{k: v for k, v in env.items() if v})


def configure_logging(level: str = "INFO") -> None:
    """Install a basic root handler at the given level name."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
