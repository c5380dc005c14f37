"""
Notification manager for market price alerts.
Compares fetched prices against tracking state and sends alerts.
"""

import logging
from typing import Optional

from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError

from .templates import MessageTemplates
from ..market import MarketClient, MarketSnapshot, Station
from ..state import TrackingState

logger = logging.getLogger(__name__)


class Notifier:
    """
    Runs the periodic market checks and sends alerts.

    Notification logic:
    - Price alert when any of the top 3 outcomes moved since the last check
    - Resolution alert on every check while the market is resolved
    """

    def __init__(
        self,
        bot: Bot,
        chat_id: str,
        client: MarketClient,
        state: TrackingState
    ):
        """
        Initialize the notifier.

        Args:
            bot: Telegram bot instance
            chat_id: Chat that receives alerts
            client: Market API client
            state: Shared tracking state
        """
        self.bot = bot
        self.chat_id = chat_id
        self.client = client
        self.state = state

    async def check_market(self, station: Station) -> None:
        """
        Compare the station's top 3 prices with the last check and alert on moves.

        The enabled flag is read once before fetching; disabling tracking
        while the fetch is in flight does not cancel this check.
        """
        if not self.state.is_enabled(station):
            return

        market = await self.client.fetch(station)
        if market is None:
            return

        changes = []
        for outcome in market.top_outcomes():
            previous = self.state.get_last_price(station, outcome.name)
            if previous is not None and previous != outcome.price:
                changes.append(MessageTemplates.format_change_line(outcome, previous))
            self.state.set_last_price(station, outcome.name, outcome.price)

        if changes:
            logger.info(f"{len(changes)} price change(s) for {station.value}")
            message = MessageTemplates.format_change_message(
                station, changes, market.volume
            )
            await self._send_alert(message)

    async def check_resolution(self, station: Station) -> None:
        """Send a resolution alert if the station's market has resolved."""
        if not self.state.is_enabled(station):
            return

        market = await self.client.fetch(station)
        if market is None or not market.resolved_outcome:
            return

        message = MessageTemplates.format_resolved_message(
            station, market.resolved_outcome, self.client.today()
        )
        await self._send_alert(message)

    async def get_snapshot(self, station: Station) -> Optional[MarketSnapshot]:
        """
        Fetch the station's market without touching tracking state.

        Args:
            station: Station to look up

        Returns:
            Market snapshot or None if no market is available
        """
        return await self.client.fetch(station)

    async def _send_alert(self, message: str) -> None:
        """
        Send an alert to the configured chat.
        Delivery failures are logged and not retried.
        """
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=message)
            logger.info(f"Sent alert to chat {self.chat_id}")
        except TelegramError as e:
            logger.error(f"Failed to send alert: {e}")

    async def send_snapshot_message(
        self,
        chat_id: int,
        station: Station,
        market: MarketSnapshot
    ) -> None:
        """
        Send the /current snapshot reply.

        Args:
            chat_id: Chat to send to
            station: Station the market belongs to
            market: Fetched market
        """
        message = MessageTemplates.format_snapshot_message(
            station, market, self.client.today()
        )
        await self.bot.send_message(
            chat_id=chat_id,
            text=message,
            parse_mode=ParseMode.MARKDOWN_V2
        )
