"""Market API client and snapshot models."""

from .client import MarketClient
from .models import Station, Outcome, MarketSnapshot, format_market_date

__all__ = [
    "MarketClient",
    "Station",
    "Outcome",
    "MarketSnapshot",
    "format_market_date"
]
