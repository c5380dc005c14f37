"""Shared fakes for bot tests."""

from typing import Dict, List, Optional

import pytest

from tempmarket_bot.market import MarketSnapshot, Outcome, Station
from tempmarket_bot.notifications import Notifier
from tempmarket_bot.state import TrackingState


def make_market(prices, volume=12345.5, resolved=None) -> MarketSnapshot:
    """Build a snapshot from (name, price) pairs."""
    return MarketSnapshot(
        slug="highest-temperature-in-london-on-march-5",
        question="Highest temperature in London on March 5?",
        outcomes=[Outcome(name=name, price=price) for name, price in prices],
        volume=volume,
        resolved_outcome=resolved,
    )


class FakeClient:
    """Market client returning queued snapshots per station."""

    def __init__(self):
        self.markets: Dict[Station, List[Optional[MarketSnapshot]]] = {
            station: [] for station in Station
        }
        self.calls: List[Station] = []

    def queue(self, station: Station, *markets: Optional[MarketSnapshot]) -> None:
        self.markets[station].extend(markets)

    def today(self) -> str:
        return "March 5"

    async def fetch(self, station: Station) -> Optional[MarketSnapshot]:
        self.calls.append(station)
        queued = self.markets[station]
        if not queued:
            return None
        # Last queued market repeats once the queue is drained
        return queued.pop(0) if len(queued) > 1 else queued[0]


class FakeBot:
    """Records outbound messages."""

    def __init__(self, error: Exception = None):
        self.sent: List[dict] = []
        self.error = error

    async def send_message(self, chat_id, text, parse_mode=None):
        if self.error:
            raise self.error
        self.sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})


class FakeMessage:
    def __init__(self, text: str):
        self.text = text
        self.replies: List[str] = []

    async def reply_text(self, text, parse_mode=None):
        self.replies.append(text)


class FakeChat:
    def __init__(self, chat_id: int):
        self.id = chat_id


class FakeUpdate:
    def __init__(self, text: str, chat_id: int = 42):
        self.effective_message = FakeMessage(text)
        self.effective_chat = FakeChat(chat_id)


@pytest.fixture
def state():
    return TrackingState()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def notifier(bot, client, state):
    return Notifier(bot=bot, chat_id="-100123", client=client, state=state)
