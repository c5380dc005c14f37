"""
Prediction-market GraphQL client.
Finds today's highest-temperature market for a station.
"""

import asyncio
import aiohttp
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import pytz

from .models import MarketSnapshot, Station, format_market_date
from ..config import DEFAULT_MARKET_API_URL

logger = logging.getLogger(__name__)


MARKETS_QUERY = """
{
  markets(first: %(first)d, query: "%(search)s") {
    edges {
      node {
        slug
        question
        outcomes {
          name
          price
        }
        volume
        resolvedOutcome {
          name
        }
      }
    }
  }
}"""


class MarketClient:
    """Client for the market-data GraphQL API."""

    RESULT_LIMIT = 10

    def __init__(self, api_url: str = DEFAULT_MARKET_API_URL, timezone: pytz.timezone = pytz.UTC):
        """
        Initialize market client.

        Args:
            api_url: GraphQL endpoint URL
            timezone: Timezone used to decide what "today" is
        """
        self.api_url = api_url
        self.timezone = timezone
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def today(self) -> str:
        """Today's date in market-title format, e.g. "March 5"."""
        return format_market_date(datetime.now(self.timezone))

    def build_search(self, station: Station) -> str:
        """Natural-language search text for the station's market today."""
        return f"highest temperature in {station.display_name} on {self.today()}"

    def build_query(self, station: Station) -> str:
        """GraphQL document asking for the first matching markets."""
        return MARKETS_QUERY % {
            "first": self.RESULT_LIMIT,
            "search": self.build_search(station),
        }

    async def fetch(self, station: Station) -> Optional[MarketSnapshot]:
        """
        Fetch today's market for a station.

        Args:
            station: Station to look up

        Returns:
            Snapshot of the first matching market, or None if there is no
            match, the request failed or the response could not be parsed
        """
        session = await self._get_session()
        payload = {"query": self.build_query(station)}

        try:
            async with session.post(self.api_url, json=payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    logger.error(
                        f"Error fetching {station.value} market: "
                        f"{response.status} - {error_text}"
                    )
                    return None
                data = await response.json(content_type=None)

            return self._parse_response(station, data)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching {station.value} market: {e}")
            return None
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error parsing {station.value} market: {e}")
            return None

    def _parse_response(
        self,
        station: Station,
        data: Dict[str, Any]
    ) -> Optional[MarketSnapshot]:
        """
        Extract the first market node from a GraphQL response.

        Raises:
            AttributeError, KeyError, TypeError, ValueError: on a malformed response
        """
        markets = (data.get("data") or {}).get("markets") or {}
        edges = markets.get("edges") or []

        if not edges:
            logger.debug(f"No {station.value} market found for {self.today()}")
            return None

        return MarketSnapshot.from_node(edges[0]["node"])
