"""
Market data models for the Temperature Market Bot.
These dataclasses hold a single fetched snapshot of a daily temperature market.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Station(str, Enum):
    """
    Weather station (city) whose daily temperature market is followed.

    The set is closed: only these members are accepted from commands.
    """
    LONDON = "london"
    NYC = "nyc"

    @property
    def display_name(self) -> str:
        """Human-readable city name, e.g. "London" or "NYC"."""
        return _DISPLAY_NAMES[self]

    @property
    def label(self) -> str:
        """Upper-case tag used in alert messages, e.g. "LONDON"."""
        return self.value.upper()

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Station"]:
        """Look up a station by name, case-insensitive. Returns None if unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_DISPLAY_NAMES = {
    Station.LONDON: "London",
    Station.NYC: "NYC",
}


def format_market_date(moment: datetime) -> str:
    """
    Format a date the way market titles spell it.

    Example: 2026-03-05 -> "March 5"
    """
    return f"{moment.strftime('%B')} {moment.day}"


def _to_float(value: Any) -> float:
    """Convert an API number (may be a numeric string or null) to float."""
    if value is None or value == "":
        return 0.0
    return float(value)


@dataclass
class Outcome:
    """A single temperature bucket and its current price (0..1)."""
    name: str
    price: float


@dataclass
class MarketSnapshot:
    """
    A market as returned by one fetch.

    Attributes:
        slug: Market slug
        question: Market question text
            Example: "Highest temperature in London on March 5?"
        outcomes: Outcomes in the order the API returned them
        volume: Total traded volume in dollars (0 when absent)
        resolved_outcome: Name of the winning outcome, None while unresolved
    """
    slug: str
    question: str
    outcomes: List[Outcome] = field(default_factory=list)
    volume: float = 0.0
    resolved_outcome: Optional[str] = None

    @classmethod
    def from_node(cls, node: Dict[str, Any]) -> "MarketSnapshot":
        """
        Build a snapshot from a GraphQL market node.

        Raises:
            KeyError, TypeError, ValueError: if the node is malformed
        """
        outcomes = [
            Outcome(name=str(item["name"]), price=_to_float(item["price"]))
            for item in node.get("outcomes") or []
        ]

        resolved = node.get("resolvedOutcome")
        resolved_name = None
        if resolved:
            resolved_name = str(resolved["name"])

        return cls(
            slug=node.get("slug") or "",
            question=node.get("question") or "",
            outcomes=outcomes,
            volume=_to_float(node.get("volume")),
            resolved_outcome=resolved_name,
        )

    def top_outcomes(self, count: int = 3) -> List[Outcome]:
        """
        Return the highest-priced outcomes.

        Sorting is stable, so outcomes with equal prices keep response order.
        """
        return sorted(self.outcomes, key=lambda o: o.price, reverse=True)[:count]
