"""
Data collection service: owns the in-memory entity lists and refreshes them
on two timers.

- slow cycle (refresh_interval): re-fetch the PulseMCP feed, regenerate the
  synthetic API services, broadcast the top-N ranked view of both lists.
- fast cycle (metrics_interval): broadcast aggregate counters.

The collector is the only writer. Each refresh replaces a list with a single
assignment, so readers always see a complete snapshot.
"""
from __future__ import annotations
import asyncio
import datetime as dt
import logging
import random
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.common import utcnow
from backend.broadcast import DATA_UPDATE, METRICS_UPDATE, Channel
from backend.config import Settings
from backend.feed import fetch_servers
from backend.models import API, MCP, APIService, Entity, MCPServer
from backend.ranking import PRIMARY_METRIC, rank_entities
from backend.synthetic import generate_api_services, generate_mcp_servers
from backend.transform import transform_servers

FeedFn = Callable[[], Awaitable[List[Dict[str, Any]]]]

SOURCE_PULSEMCP = "pulsemcp"
SOURCE_SYNTHETIC = "synthetic"


class DataCollector:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        feed: Optional[FeedFn] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rng = rng or random.Random()
        self._feed = feed or self._default_feed
        self.mcp_servers: List[MCPServer] = []
        self.api_services: List[APIService] = []
        self.mcp_source = SOURCE_SYNTHETIC
        self.last_updated: Optional[dt.datetime] = None
        self.channel: Optional[Channel] = None
        self._tasks: List[asyncio.Task] = []

    async def _default_feed(self) -> List[Dict[str, Any]]:
        return await fetch_servers(
            url=self.settings.pulsemcp_url,
            timeout=self.settings.feed_timeout,
            max_pages=self.settings.feed_max_pages,
        )

    def entities(self, kind: str) -> List[Entity]:
        return list(self.mcp_servers if kind == MCP else self.api_services)

    async def refresh(self) -> None:
        """Run one slow cycle."""
        logging.info("Updating server and API data...")
        raw = await self._feed() if self.settings.use_real_data else []
        fresh: List[MCPServer] = []
        if raw:
            try:
                fresh = transform_servers(raw, self.rng)
            except Exception:
                logging.exception("Could not transform PulseMCP data; ignoring this fetch")
        if fresh:
            self.mcp_servers = fresh
            self.mcp_source = SOURCE_PULSEMCP
            logging.info(f"Using real MCP data: {len(self.mcp_servers)} servers")
        elif not self.mcp_servers:
            self.mcp_servers = generate_mcp_servers(self.rng)
            self.mcp_source = SOURCE_SYNTHETIC
            logging.info(f"Using synthetic MCP data: {len(self.mcp_servers)} servers")
        else:
            logging.info(f"No fresh MCP data; keeping {len(self.mcp_servers)} {self.mcp_source} servers")

        # no real source exists for API services
        self.api_services = generate_api_services(self.rng)
        self.last_updated = utcnow()

        if self.channel is not None:
            self.channel.publish(DATA_UPDATE, self.top_rankings())
            logging.info(f"Data update broadcast to {self.channel.subscriber_count} subscribers")

    def load_synthetic(self) -> None:
        """Fill any empty list with generated entities."""
        if not self.mcp_servers:
            self.mcp_servers = generate_mcp_servers(self.rng)
            self.mcp_source = SOURCE_SYNTHETIC
        if not self.api_services:
            self.api_services = generate_api_services(self.rng)
        self.last_updated = self.last_updated or utcnow()

    def top_rankings(self, n: Optional[int] = None) -> Dict[str, Any]:
        n = n or self.settings.broadcast_top_n
        return {
            "mcp_servers": [e.asdict() for e in rank_entities(self.mcp_servers, PRIMARY_METRIC[MCP], self.rng)[:n]],
            "api_services": [e.asdict() for e in rank_entities(self.api_services, PRIMARY_METRIC[API], self.rng)[:n]],
            "timestamp": self.last_updated,
        }

    def metrics(self) -> Dict[str, Any]:
        return {
            "total_mcp_downloads": sum(s.downloads for s in self.mcp_servers),
            "total_api_requests": sum(s.requests for s in self.api_services),
            "active_mcp_servers": len(self.mcp_servers),
            "active_api_services": len(self.api_services),
            "timestamp": utcnow(),
        }

    def publish_metrics(self) -> None:
        if self.channel is not None:
            self.channel.publish(METRICS_UPDATE, self.metrics())

    async def _every(self, interval: float, tick: Callable[[], Awaitable[None]], name: str) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await tick()
            except Exception:
                logging.exception(f"{name} cycle failed; will retry next tick")

    async def _metrics_tick(self) -> None:
        self.publish_metrics()

    async def start(self, channel: Channel) -> None:
        """Load initial data, then run both cycles for the lifetime of the loop."""
        logging.info("Starting data collection service...")
        self.channel = channel
        try:
            await self.refresh()
        except Exception:
            logging.exception("Initial refresh failed; serving synthetic data until the next cycle")
            self.load_synthetic()
        self._tasks = [
            asyncio.create_task(self._every(self.settings.refresh_interval, self.refresh, "refresh")),
            asyncio.create_task(self._every(self.settings.metrics_interval, self._metrics_tick, "metrics")),
        ]

    async def stop(self) -> None:
        for t in self._tasks:
            t.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
