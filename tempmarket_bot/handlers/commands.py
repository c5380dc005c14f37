"""
Telegram bot command handlers.
Parses incoming text into commands and answers them.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes
from telegram.error import TelegramError

from ..market import Station
from ..notifications import Notifier, MessageTemplates
from ..state import TrackingState

logger = logging.getLogger(__name__)


class CommandKind(Enum):
    """Every command the bot understands."""
    HELP = "help"
    ALERT = "alert"
    STOP = "stop"
    CURRENT = "current"
    RESOLVE = "resolve"
    STATUS = "status"


@dataclass(frozen=True)
class Command:
    """A parsed command. `station` is set only for station commands."""
    kind: CommandKind
    station: Optional[Station] = None


# name -> (kind, needs station, slash required)
_COMMANDS = {
    "start": (CommandKind.HELP, False, True),
    "help": (CommandKind.HELP, False, True),
    "alert": (CommandKind.ALERT, True, False),
    "stop": (CommandKind.STOP, True, False),
    "current": (CommandKind.CURRENT, True, True),
    "resolve": (CommandKind.RESOLVE, False, True),
    "status": (CommandKind.STATUS, False, True),
}


def parse_command(text: Optional[str]) -> Optional[Command]:
    """
    Parse message text into a command.

    The first word names the command (case-insensitive, "@botname" suffix
    allowed). Station commands take the station as the second word.

    Examples:
        "/alert london" -> Command(ALERT, Station.LONDON)
        "STOP nyc"      -> Command(STOP, Station.NYC)
        "/help@my_bot"  -> Command(HELP)
        "current nyc"   -> None (slash required)
        "/alert paris"  -> None

    Returns:
        Parsed command, or None if the text is not a command
    """
    if not text:
        return None

    words = text.split()
    if not words:
        return None

    head = words[0].lower()
    has_slash = head.startswith("/")
    name = head.lstrip("/").split("@", 1)[0]

    spec = _COMMANDS.get(name)
    if spec is None:
        return None

    kind, needs_station, slash_required = spec
    if slash_required and not has_slash:
        return None

    if not needs_station:
        return Command(kind)

    station = Station.parse(words[1]) if len(words) > 1 else None
    if station is None:
        return None
    return Command(kind, station)


class CommandHandlers:
    """
    Handles all Telegram bot commands.

    Station toggles write to tracking state; snapshot commands only read
    the market API.
    """

    def __init__(self, state: TrackingState, notifier: Notifier):
        """
        Initialize command handlers.

        Args:
            state: Shared tracking state
            notifier: Notifier instance
        """
        self.state = state
        self.notifier = notifier

    async def handle_message(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Dispatch a text message to its command. Non-commands are ignored."""
        message = update.effective_message
        if message is None:
            return

        command = parse_command(message.text)
        if command is None:
            return

        logger.debug(f"Command {command.kind.value} in chat {update.effective_chat.id}")

        if command.kind is CommandKind.HELP:
            await self.help_command(update)
        elif command.kind is CommandKind.ALERT:
            await self.alert_command(update, command.station)
        elif command.kind is CommandKind.STOP:
            await self.stop_command(update, command.station)
        elif command.kind is CommandKind.CURRENT:
            await self.current_command(update, command.station)
        elif command.kind is CommandKind.RESOLVE:
            await self.resolve_command(update)
        elif command.kind is CommandKind.STATUS:
            await self.status_command(update)

    async def _reply(self, update: Update, text: str) -> None:
        """Reply in the originating chat; failures are logged only."""
        try:
            await update.effective_message.reply_text(text)
        except TelegramError as e:
            logger.error(f"Failed to send reply: {e}")

    async def help_command(self, update: Update) -> None:
        """Handle /start and /help."""
        await self._reply(update, MessageTemplates.format_help_message())

    async def alert_command(self, update: Update, station: Station) -> None:
        """Handle "alert <station>": start tracking."""
        self.state.set_enabled(station, True)
        await self._reply(update, MessageTemplates.format_tracking_started(station))

    async def stop_command(self, update: Update, station: Station) -> None:
        """Handle "stop <station>": stop tracking."""
        self.state.set_enabled(station, False)
        await self._reply(update, MessageTemplates.format_tracking_stopped(station))

    async def current_command(self, update: Update, station: Station) -> None:
        """
        Handle /current <station>.
        Shows the top 3 outcomes now, whether or not the station is tracked.
        """
        market = await self.notifier.get_snapshot(station)
        if market is None:
            await self._reply(update, MessageTemplates.format_no_market_message(station))
            return

        try:
            await self.notifier.send_snapshot_message(
                update.effective_chat.id, station, market
            )
        except TelegramError as e:
            logger.error(f"Failed to send {station.value} snapshot: {e}")

    async def resolve_command(self, update: Update) -> None:
        """Handle /resolve: resolution status of every station's market."""
        lines = []
        for station in Station:
            market = await self.notifier.get_snapshot(station)
            lines.append(
                MessageTemplates.format_resolution_status(
                    station, market, self.notifier.client.today()
                )
            )
        await self._reply(update, "\n".join(lines))

    async def status_command(self, update: Update) -> None:
        """Handle /status: which stations are tracked."""
        entries = [(station, self.state.entry(station)) for station in Station]
        await self._reply(update, MessageTemplates.format_status_message(entries))
