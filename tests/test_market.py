"""Tests for market models and the GraphQL client."""

import asyncio
from datetime import datetime

import aiohttp
import pytest

from tempmarket_bot.config import DEFAULT_MARKET_API_URL
from tempmarket_bot.market import MarketClient, MarketSnapshot, Station, format_market_date

from conftest import make_market


NODE = {
    "slug": "highest-temperature-in-nyc-on-march-5",
    "question": "Highest temperature in NYC on March 5?",
    "outcomes": [
        {"name": "40-41°F", "price": 0.2},
        {"name": "42-43°F", "price": "0.55"},
        {"name": "44-45°F", "price": 0.25},
    ],
    "volume": "98765.4",
    "resolvedOutcome": None,
}


def graphql_response(*nodes):
    return {"data": {"markets": {"edges": [{"node": node} for node in nodes]}}}


class FakeResponse:
    def __init__(self, status=200, payload=None, text=""):
        self.status = status
        self.payload = payload
        self._text = text

    async def json(self, content_type=None):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    closed = False

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None):
        self.posts.append((url, json))
        if self.error:
            raise self.error
        return self.response


def client_with(session) -> MarketClient:
    client = MarketClient("https://example.test/graphql")
    client._session = session
    return client


class TestStation:
    """Tests for the station enum."""

    def test_parse_case_insensitive(self):
        assert Station.parse("London") is Station.LONDON
        assert Station.parse(" NYC ") is Station.NYC

    def test_parse_unknown(self):
        assert Station.parse("paris") is None
        assert Station.parse("") is None
        assert Station.parse(None) is None

    def test_labels(self):
        assert Station.LONDON.label == "LONDON"
        assert Station.NYC.display_name == "NYC"


class TestMarketDate:
    def test_no_padding(self):
        assert format_market_date(datetime(2026, 3, 5)) == "March 5"

    def test_two_digit_day(self):
        assert format_market_date(datetime(2026, 10, 19)) == "October 19"


class TestSnapshot:
    """Tests for snapshot parsing and top outcome selection."""

    def test_from_node(self):
        market = MarketSnapshot.from_node(NODE)
        assert market.slug == NODE["slug"]
        assert [o.name for o in market.outcomes] == ["40-41°F", "42-43°F", "44-45°F"]
        assert market.outcomes[1].price == 0.55
        assert market.volume == 98765.4
        assert market.resolved_outcome is None

    def test_missing_volume_is_zero(self):
        node = dict(NODE, volume=None)
        assert MarketSnapshot.from_node(node).volume == 0.0

    def test_resolved_outcome(self):
        node = dict(NODE, resolvedOutcome={"name": "42-43°F"})
        assert MarketSnapshot.from_node(node).resolved_outcome == "42-43°F"

    def test_bad_price_raises(self):
        node = dict(NODE, outcomes=[{"name": "x", "price": "n/a"}])
        with pytest.raises(ValueError):
            MarketSnapshot.from_node(node)

    def test_top_outcomes_stable_ties(self):
        market = make_market([("A", 0.5), ("B", 0.5), ("C", 0.3), ("D", 0.2)])
        assert [o.name for o in market.top_outcomes()] == ["A", "B", "C"]

    def test_top_outcomes_descending(self):
        market = make_market([("low", 0.1), ("high", 0.7), ("mid", 0.2)])
        assert [o.name for o in market.top_outcomes()] == ["high", "mid", "low"]

    def test_top_outcomes_fewer_than_three(self):
        market = make_market([("only", 1.0)])
        assert len(market.top_outcomes()) == 1


class TestMarketClient:
    """Tests for MarketClient.fetch."""

    def test_default_url_comes_from_config(self):
        assert MarketClient().api_url == DEFAULT_MARKET_API_URL

    def test_query_embeds_station_and_date(self):
        client = MarketClient()
        query = client.build_query(Station.LONDON)
        assert "first: 10" in query
        assert f'"highest temperature in London on {client.today()}"' in query
        assert "resolvedOutcome" in query

    def test_fetch_returns_first_node(self):
        other = dict(NODE, slug="second")
        session = FakeSession(FakeResponse(payload=graphql_response(NODE, other)))
        client = client_with(session)

        market = asyncio.run(client.fetch(Station.NYC))

        assert market.slug == NODE["slug"]
        url, body = session.posts[0]
        assert url == "https://example.test/graphql"
        assert "highest temperature in NYC on" in body["query"]

    def test_no_edges_returns_none(self, caplog):
        session = FakeSession(FakeResponse(payload=graphql_response()))
        with caplog.at_level("ERROR"):
            assert asyncio.run(client_with(session).fetch(Station.NYC)) is None
        assert not caplog.records

    def test_network_error_returns_none(self, caplog):
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
        with caplog.at_level("ERROR"):
            assert asyncio.run(client_with(session).fetch(Station.LONDON)) is None
        assert "Error fetching london market" in caplog.text

    def test_bad_status_returns_none(self, caplog):
        session = FakeSession(FakeResponse(status=502, text="bad gateway"))
        with caplog.at_level("ERROR"):
            assert asyncio.run(client_with(session).fetch(Station.LONDON)) is None
        assert "502" in caplog.text

    def test_invalid_json_returns_none(self, caplog):
        session = FakeSession(FakeResponse(payload=ValueError("not json")))
        with caplog.at_level("ERROR"):
            assert asyncio.run(client_with(session).fetch(Station.LONDON)) is None
        assert "Error parsing london market" in caplog.text

    def test_malformed_node_returns_none(self):
        payload = {"data": {"markets": {"edges": [{"nope": {}}]}}}
        session = FakeSession(FakeResponse(payload=payload))
        assert asyncio.run(client_with(session).fetch(Station.LONDON)) is None
