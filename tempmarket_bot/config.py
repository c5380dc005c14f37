"""
Configuration management for the Temperature Market Bot.
All settings come from the environment; a .env file is loaded if present.
"""

import os
import logging
from typing import List

from dotenv import load_dotenv
import pytz

load_dotenv()

DEFAULT_MARKET_API_URL = "https://api.polymarket.com/graphql"


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name, "") or str(default)
    try:
        return int(value)
    except ValueError:
        logging.warning(f"Invalid {name} '{value}', using {default}")
        return default


class Config:
    """
    Application configuration.
    BOT_TOKEN and TELEGRAM_CHAT_ID are required; everything else has a default.
    """

    BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: str = os.getenv("TELEGRAM_CHAT_ID", "")
    POLLING_INTERVAL_SECONDS: int = _int_from_env("POLLING_INTERVAL_SECONDS", 60)
    MARKET_API_URL: str = os.getenv("MARKET_API_URL", "") or DEFAULT_MARKET_API_URL
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC") or "UTC"
    LOG_LEVEL: str = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()

    @classmethod
    def get_timezone(cls) -> pytz.timezone:
        """Get the configured timezone object."""
        try:
            return pytz.timezone(cls.TIMEZONE)
        except pytz.exceptions.UnknownTimeZoneError:
            logging.warning(f"Unknown timezone '{cls.TIMEZONE}', using UTC")
            return pytz.UTC

    @classmethod
    def validate(cls) -> List[str]:
        """
        Validate configuration and return list of errors.
        Returns empty list if configuration is valid.
        """
        errors = []

        if not cls.BOT_TOKEN:
            errors.append("BOT_TOKEN is required")

        if not cls.TELEGRAM_CHAT_ID:
            errors.append("TELEGRAM_CHAT_ID is required")

        if cls.POLLING_INTERVAL_SECONDS < 1:
            errors.append("POLLING_INTERVAL_SECONDS must be at least 1")

        if not cls.MARKET_API_URL.startswith(("http://", "https://")):
            errors.append("MARKET_API_URL must be an http(s) URL")

        return errors

    @classmethod
    def setup_logging(cls) -> None:
        """Configure logging based on settings."""
        log_level = getattr(logging, cls.LOG_LEVEL, logging.INFO)

        logging.basicConfig(
            level=log_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=[logging.StreamHandler()]
        )

        # Reduce noise from external libraries
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("telegram").setLevel(logging.WARNING)
        logging.getLogger("apscheduler").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)
