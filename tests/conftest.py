from __future__ import annotations
import asyncio, json, pathlib, random

import pytest

from backend.config import Settings
from backend.collector import DataCollector

TESTS_DIR = pathlib.Path(__file__).resolve().parent

@pytest.fixture
def pulsemcp_page() -> dict:
    return json.loads((TESTS_DIR / "pulsemcp-servers.json").read_text(encoding="utf-8"))

@pytest.fixture
def pulsemcp_records(pulsemcp_page) -> list[dict]:
    return pulsemcp_page["servers"]

@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)

@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", refresh_interval=3600, metrics_interval=0.05)

def make_feed(records=None, fail: bool = False):
    async def feed():
        if fail:
            return []
        return list(records or [])
    return feed

@pytest.fixture
def feed_factory():
    return make_feed

@pytest.fixture
def synthetic_collector(settings, rng) -> DataCollector:
    """Collector whose feed always comes back empty, refreshed once."""
    c = DataCollector(settings, feed=make_feed(fail=True), rng=rng)
    asyncio.run(c.refresh())
    return c
