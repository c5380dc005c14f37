"""
Message templates for market alerts and command replies.
Alerts are plain text; the /current snapshot uses MarkdownV2.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from ..market.models import MarketSnapshot, Outcome, Station
from ..state.models import TrackingEntry


class MessageTemplates:
    """
    Message formatter for Telegram alerts and replies.

    Only the snapshot reply is sent as MarkdownV2, so only it escapes text.
    """

    @classmethod
    def escape_markdown(cls, text: str) -> str:
        """
        Escape special characters for MarkdownV2.

        Args:
            text: Raw text to escape

        Returns:
            Escaped text safe for MarkdownV2
        """
        if not text:
            return ""
        return re.sub(r'([_*\[\]()~`>#+=|{}.!-])', r'\\\1', str(text))

    @staticmethod
    def format_percent(price: float) -> str:
        """0.6734 -> "67%". Halves round up: 0.125 -> "13%"."""
        percent = Decimal(str(price * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return f"{percent}%"

    @staticmethod
    def format_cents(price: float) -> str:
        """0.6734 -> "67.34¢"."""
        return f"{price * 100:.2f}¢"

    @staticmethod
    def format_volume(volume: Optional[float]) -> str:
        """
        Format dollar volume with thousands separators.

        Up to three decimals are kept and trailing zeros dropped:
        12345.5 -> "12,345.5", 1000 -> "1,000", None -> "0".
        """
        text = f"{volume or 0:,.3f}"
        return text.rstrip("0").rstrip(".")

    @classmethod
    def format_change_line(cls, outcome: Outcome, previous: float) -> str:
        """
        Format one price move, e.g. "70-71°F ↑ 45% (45.00¢)".

        Args:
            outcome: Outcome with its current price
            previous: Price seen at the previous check
        """
        arrow = "↑" if outcome.price > previous else "↓"
        return (
            f"{outcome.name} {arrow} {cls.format_percent(outcome.price)} "
            f"({cls.format_cents(outcome.price)})"
        )

    @classmethod
    def format_change_message(
        cls,
        station: Station,
        changes: List[str],
        volume: Optional[float]
    ) -> str:
        """Combine change lines into a single alert."""
        return (
            f"[{station.label}] {', '.join(changes)}\n"
            f"Total Volume: ${cls.format_volume(volume)}"
        )

    @staticmethod
    def format_resolved_message(station: Station, outcome_name: str, date: str) -> str:
        """Alert for a market that has resolved."""
        return f"✅ [{station.label}] Resolved: {outcome_name} ({date})"

    @classmethod
    def format_snapshot_message(
        cls,
        station: Station,
        market: MarketSnapshot,
        date: str
    ) -> str:
        """
        Format the top outcomes of a market for the /current command.

        Returns:
            Formatted MarkdownV2 message
        """
        title = f"{station.display_name} Top 3 Options ({date})"
        lines = [f"*{cls.escape_markdown(title)}*"]

        for outcome in market.top_outcomes():
            line = (
                f"• {outcome.name}: {cls.format_percent(outcome.price)} "
                f"({cls.format_cents(outcome.price)})"
            )
            lines.append(cls.escape_markdown(line))

        lines.append(cls.escape_markdown(f"Total Volume: ${cls.format_volume(market.volume)}"))
        return "\n".join(lines)

    @staticmethod
    def format_no_market_message(station: Station) -> str:
        return f"❌ No market found for {station.display_name} today."

    @classmethod
    def format_resolution_status(
        cls,
        station: Station,
        market: Optional[MarketSnapshot],
        date: str
    ) -> str:
        """One line of the /resolve reply."""
        if market is None:
            return cls.format_no_market_message(station)
        if market.resolved_outcome:
            return cls.format_resolved_message(station, market.resolved_outcome, date)
        return f"⏳ [{station.label}] Not resolved yet ({date})"

    @staticmethod
    def format_tracking_started(station: Station) -> str:
        return f"✅ Now tracking {station.display_name} weather markets!"

    @staticmethod
    def format_tracking_stopped(station: Station) -> str:
        return f"⏹ Stopped tracking {station.display_name}."

    @staticmethod
    def format_status_message(entries: List[Tuple[Station, TrackingEntry]]) -> str:
        """
        Format tracking status for every station.

        Args:
            entries: (Station, TrackingEntry) pairs
        """
        lines = ["📊 Tracking status:"]
        for station, entry in entries:
            state = "✅ on" if entry.enabled else "⏹ off"
            lines.append(
                f"{station.display_name}: {state} "
                f"({len(entry.last_prices)} prices remembered)"
            )
        return "\n".join(lines)

    @staticmethod
    def format_help_message() -> str:
        """Static command list."""
        return (
            "Hi! Commands:\n\n"
            "/alert london - track London temperature market\n"
            "/stop london - stop tracking London\n"
            "/alert nyc - track NYC temperature market\n"
            "/stop nyc - stop tracking NYC\n"
            "/current london - top 3 London outcomes now\n"
            "/current nyc - top 3 NYC outcomes now\n"
            "/resolve - resolution status for both cities\n"
            "/status - what is being tracked"
        )
