"""
Download eco.json opening data from GitHub.

Shards are fetched once per EcoJsonCache instance. Callers create the cache,
keep it as long as they want the data, and pass it where it is needed.

Usage:
  cache = EcoJsonCache()
  async with httpx.AsyncClient(timeout=cache.timeout) as session:
      book = await cache.book(session)
  ECO_JSON_URL=https://example.org/eco.json/ python -m ecolookup.lookup --remote --fen "..."
"""

import asyncio
import os

import httpx

from ecolookup.catalog import (
    FROM_TO_FILE,
    INTERPOLATED_FILE,
    OpeningBook,
    merge_shards,
    parse_shard,
    parse_transitions,
    shard_file_name,
)
from ecolookup.models import ECO_CATEGORIES, Opening, Transition

DEFAULT_ECO_JSON_URL = "https://raw.githubusercontent.com/JeffML/eco.json/master/"
INTERPOLATED = "IN"


def get_eco_json_url() -> str:
    """Base URL of the eco.json repository from environment."""
    url = os.environ.get("ECO_JSON_URL", DEFAULT_ECO_JSON_URL)
    return url if url.endswith("/") else url + "/"


def get_timeout() -> float:
    return float(os.environ.get("ECO_JSON_TIMEOUT", "30"))


def shard_urls(base_url: str) -> dict[str, str]:
    """Category -> URL for ecoA..E.json and the interpolated shard."""
    urls = {cat: base_url + shard_file_name(cat) for cat in ECO_CATEGORIES}
    urls[INTERPOLATED] = base_url + INTERPOLATED_FILE
    return urls


async def fetch_json(url: str, session: httpx.AsyncClient):
    resp = await session.get(url)
    resp.raise_for_status()
    return resp.json()


class EcoJsonCache:
    """Downloaded eco.json shards and transitions, fetched on first use."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or get_eco_json_url()
        self.timeout = timeout if timeout is not None else get_timeout()
        self._shards: dict[str, dict[str, Opening]] | None = None
        self._transitions: list[Transition] | None = None

    @property
    def initialized(self) -> bool:
        return self._shards is not None

    def clear(self) -> None:
        self._shards = None
        self._transitions = None

    async def _with_session(self, session, fetch):
        if session is not None:
            return await fetch(session)
        async with httpx.AsyncClient(timeout=self.timeout) as own:
            return await fetch(own)

    async def get_latest_eco_json(
        self, session: httpx.AsyncClient | None = None
    ) -> dict[str, dict[str, Opening]]:
        """Shards by category (A-E, plus IN for interpolated)."""
        if self._shards is None:
            urls = shard_urls(self.base_url)

            async def fetch(s):
                return await asyncio.gather(*(fetch_json(url, s) for url in urls.values()))

            payloads = await self._with_session(session, fetch)
            self._shards = {cat: parse_shard(data) for cat, data in zip(urls, payloads)}
        return self._shards

    async def opening_book(self, session: httpx.AsyncClient | None = None):
        """All shards merged, A..E then interpolated, later shards winning."""
        shards = await self.get_latest_eco_json(session)
        order = [*ECO_CATEGORIES, INTERPOLATED]
        return merge_shards((shards[cat] for cat in order if cat in shards), precedence="last")

    async def from_tos(self, session: httpx.AsyncClient | None = None) -> list[Transition]:
        if self._transitions is None:
            url = self.base_url + FROM_TO_FILE

            async def fetch(s):
                return await fetch_json(url, s)

            self._transitions = parse_transitions(await self._with_session(session, fetch))
        return self._transitions

    async def book(self, session: httpx.AsyncClient | None = None) -> OpeningBook:
        openings = await self.opening_book(session)
        edges = await self.from_tos(session)
        return OpeningBook.build(openings, edges)
