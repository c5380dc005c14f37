"""
In-memory tracking state shared by the scheduler and command handlers.
"""

import logging
from typing import Dict, Optional

from .models import TrackingEntry
from ..market.models import Station

logger = logging.getLogger(__name__)


class TrackingState:
    """
    Tracking flags and last-seen prices for every station.

    All access happens on the bot's event loop, so no locking is done here.
    """

    def __init__(self):
        """Initialize all stations as disabled with no prices."""
        self._entries: Dict[Station, TrackingEntry] = {
            station: TrackingEntry() for station in Station
        }

    def entry(self, station: Station) -> TrackingEntry:
        """Get the tracking record for a station."""
        return self._entries[station]

    def set_enabled(self, station: Station, enabled: bool) -> None:
        """Turn tracking on or off for a station."""
        self._entries[station].enabled = enabled
        logger.info(f"Tracking for {station.value} {'enabled' if enabled else 'disabled'}")

    def is_enabled(self, station: Station) -> bool:
        """Check whether a station is being tracked."""
        return self._entries[station].enabled

    def get_last_price(self, station: Station, outcome_name: str) -> Optional[float]:
        """
        Get the previously seen price of an outcome.

        Returns:
            Last price, or None if this outcome was never seen
        """
        return self._entries[station].last_prices.get(outcome_name)

    def set_last_price(self, station: Station, outcome_name: str, price: float) -> None:
        """Remember the price of an outcome for the next comparison."""
        self._entries[station].last_prices[outcome_name] = price
