"""
Tracking state models for the Temperature Market Bot.
These dataclasses live in memory only and reset on restart.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class TrackingEntry:
    """
    Per-station tracking record.

    Attributes:
        enabled: Whether scheduled checks run for this station
        last_prices: Price seen at the previous check, keyed by outcome name
            Example: {"70-71°F": 0.45, "72-73°F": 0.3}
            Entries are overwritten but never removed.
    """
    enabled: bool = False
    last_prices: Dict[str, float] = field(default_factory=dict)
