"""
Main entry point for the Temperature Market Bot.
Initializes all components and starts the bot.
"""

import asyncio
import logging
import signal
from typing import Optional

from telegram import Update
from telegram.ext import (
    Application,
    MessageHandler,
    filters
)
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import pytz

from .config import Config
from .market import MarketClient, Station
from .state import TrackingState
from .notifications import Notifier
from .handlers import CommandHandlers

logger = logging.getLogger(__name__)


class MarketAlertBot:
    """
    Main bot class that coordinates all components.
    Owns the tracking state and hands it to the notifier and handlers.
    """

    def __init__(self):
        """Initialize the bot."""
        self.state: TrackingState = TrackingState()
        self.client: MarketClient = None
        self.notifier: Notifier = None
        self.scheduler: AsyncIOScheduler = None
        self.application: Application = None
        self._stop_event: Optional[asyncio.Event] = None

    async def initialize(self) -> None:
        """
        Initialize all bot components.

        Raises:
            ValueError: if required configuration is missing
        """
        Config.setup_logging()
        errors = Config.validate()
        if errors:
            for error in errors:
                logger.error(f"Config error: {error}")
            raise ValueError("Invalid configuration. Check environment or .env file.")

        logger.debug("Initializing Market Alert Bot...")
        timezone = Config.get_timezone()

        self.client = MarketClient(Config.MARKET_API_URL, timezone)

        # Build telegram application
        self.application = (
            Application.builder()
            .token(Config.BOT_TOKEN)
            .build()
        )

        self.notifier = Notifier(
            bot=self.application.bot,
            chat_id=Config.TELEGRAM_CHAT_ID,
            client=self.client,
            state=self.state
        )

        self._setup_handlers()
        self._setup_scheduler(timezone)

        logger.debug("Market Alert Bot initialized successfully")

    def _setup_handlers(self) -> None:
        """Setup Telegram message handler."""
        cmd_handlers = CommandHandlers(self.state, self.notifier)

        # Commands are parsed from the text so plain "alert london" works too.
        # Edited messages and channel posts are not commands.
        self.application.add_handler(
            MessageHandler(
                filters.TEXT & filters.UpdateType.MESSAGE,
                cmd_handlers.handle_message
            )
        )

        logger.debug("Command handlers registered")

    def _setup_scheduler(self, timezone: pytz.timezone) -> None:
        """
        Setup periodic market checks.

        One job per station per check type. max_instances=1 drops a tick
        while the previous run of the same job is still in flight.
        """
        self.scheduler = AsyncIOScheduler(timezone=timezone)
        trigger_seconds = Config.POLLING_INTERVAL_SECONDS

        for station in Station:
            self.scheduler.add_job(
                self._scheduled_market_check,
                trigger=IntervalTrigger(seconds=trigger_seconds),
                args=[station],
                id=f"market_check_{station.value}",
                name=f"Price check {station.display_name}",
                max_instances=1,
                coalesce=True,
                replace_existing=True
            )
            self.scheduler.add_job(
                self._scheduled_resolution_check,
                trigger=IntervalTrigger(seconds=trigger_seconds),
                args=[station],
                id=f"resolution_check_{station.value}",
                name=f"Resolution check {station.display_name}",
                max_instances=1,
                coalesce=True,
                replace_existing=True
            )

        logger.debug(f"Scheduler configured: market checks every {trigger_seconds} seconds")

    async def _scheduled_market_check(self, station: Station) -> None:
        """Scheduled job to check one station's prices."""
        try:
            await self.notifier.check_market(station)
        except Exception as e:
            logger.error(f"Error in scheduled market check for {station.value}: {e}")

    async def _scheduled_resolution_check(self, station: Station) -> None:
        """Scheduled job to check whether one station's market resolved."""
        try:
            await self.notifier.check_resolution(station)
        except Exception as e:
            logger.error(f"Error in scheduled resolution check for {station.value}: {e}")

    async def start(self) -> None:
        """Start the scheduler and Telegram polling. Returns once both are running."""
        if self._stop_event is not None:
            logger.warning("Bot is already running")
            return

        self._stop_event = asyncio.Event()
        self.scheduler.start()

        await self.application.initialize()
        await self.application.start()
        await self.application.updater.start_polling(
            allowed_updates=Update.ALL_TYPES
        )

        logger.info("✅ Bot running...")

    def request_stop(self) -> None:
        """Ask a running bot to shut down. Safe to call from a signal handler."""
        if self._stop_event is not None:
            self._stop_event.set()

    async def wait_until_stopped(self) -> None:
        """Block until request_stop() is called."""
        if self._stop_event is not None:
            await self._stop_event.wait()

    async def stop(self) -> None:
        """Release everything that was started. Safe to call more than once."""
        logger.debug("Stopping Market Alert Bot...")

        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)

        app = self.application
        if app:
            try:
                if app.updater and app.updater.running:
                    await app.updater.stop()
                if app.running:
                    await app.stop()
                await app.shutdown()
            except RuntimeError as e:
                logger.debug(f"Application shutdown: {e}")

        if self.client:
            await self.client.close()

        self._stop_event = None
        logger.debug("Market Alert Bot stopped")


async def main() -> None:
    """Initialize, run until SIGINT/SIGTERM, then shut down."""
    bot = MarketAlertBot()
    await bot.initialize()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, bot.request_stop)

    try:
        await bot.start()
        await bot.wait_until_stopped()
        logger.debug("Received shutdown signal")
    finally:
        await bot.stop()


def run() -> None:
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.debug("Interrupted by user")


if __name__ == "__main__":
    run()
