from __future__ import annotations
import asyncio
import dataclasses

from backend.broadcast import DATA_UPDATE, METRICS_UPDATE, Channel
from backend.collector import SOURCE_PULSEMCP, SOURCE_SYNTHETIC, DataCollector
from backend.models import API_CATEGORIES, MCP_CATEGORIES
from backend.queries import Queries


def test_empty_feed_falls_back_to_synthetic(synthetic_collector):
    c = synthetic_collector
    assert c.mcp_source == SOURCE_SYNTHETIC
    assert len(c.mcp_servers) == 20
    assert all(s.category in MCP_CATEGORIES for s in c.mcp_servers)
    assert all(s.category in API_CATEGORIES for s in c.api_services)
    assert c.last_updated is not None

def test_real_feed_replaces_mcp_list(settings, rng, pulsemcp_records, feed_factory):
    c = DataCollector(settings, feed=feed_factory(pulsemcp_records), rng=rng)
    asyncio.run(c.refresh())
    assert c.mcp_source == SOURCE_PULSEMCP
    assert [s.id for s in c.mcp_servers] == ["mcp-postgres-database-bridge", "mcp-slack-notifier", "mcp-weather"]
    assert len(c.api_services) == 20

def test_failed_refresh_keeps_previous_mcp_list_and_api_stays_queryable(settings, rng, pulsemcp_records, feed_factory):
    c = DataCollector(settings, feed=feed_factory(pulsemcp_records), rng=rng)
    asyncio.run(c.refresh())
    before = c.mcp_servers

    c._feed = feed_factory(fail=True)
    asyncio.run(c.refresh())
    assert c.mcp_servers is before
    assert c.mcp_source == SOURCE_PULSEMCP

    page = Queries(c).most_downloaded("api", limit=5)
    assert len(page.items) == 5

def test_use_real_data_false_skips_feed(settings, rng):
    called = []

    async def feed():
        called.append(True)
        return [{"name": "never-used"}]

    c = DataCollector(dataclasses.replace(settings, use_real_data=False), feed=feed, rng=rng)
    asyncio.run(c.refresh())
    assert called == []
    assert c.mcp_source == SOURCE_SYNTHETIC

def test_refresh_broadcasts_top_n(settings, rng, feed_factory):
    async def go():
        c = DataCollector(dataclasses.replace(settings, broadcast_top_n=3), feed=feed_factory(fail=True), rng=rng)
        channel = Channel()
        c.channel = channel
        sub = channel.subscribe()
        await c.refresh()
        return await sub.get()

    msg = asyncio.run(go())
    assert msg.event == DATA_UPDATE
    assert [e["rank"] for e in msg.data["mcp_servers"]] == [1, 2, 3]
    assert len(msg.data["api_services"]) == 3
    downloads = [e["server"]["downloads"] for e in msg.data["mcp_servers"]]
    assert downloads == sorted(downloads, reverse=True)

def test_metrics_sum_the_lists(synthetic_collector):
    c = synthetic_collector
    m = c.metrics()
    assert m["total_mcp_downloads"] == sum(s.downloads for s in c.mcp_servers)
    assert m["total_api_requests"] == sum(s.requests for s in c.api_services)
    assert m["active_mcp_servers"] == 20
    assert m["active_api_services"] == 20

def test_start_runs_both_cycles_until_stopped(settings, rng, feed_factory):
    async def go():
        c = DataCollector(dataclasses.replace(settings, refresh_interval=0.05, metrics_interval=0.02),
                          feed=feed_factory(fail=True), rng=rng)
        channel = Channel()
        sub = channel.subscribe()
        await c.start(channel)
        events = set()
        while events != {DATA_UPDATE, METRICS_UPDATE}:
            events.add((await asyncio.wait_for(sub.get(), timeout=2)).event)
        await c.stop()
        return c

    c = asyncio.run(go())
    assert c._tasks == []

def test_failing_tick_does_not_stop_the_loop(settings, rng):
    async def go():
        calls = []

        async def boom():
            calls.append(1)
            raise RuntimeError("tick failed")

        c = DataCollector(settings, rng=rng)
        task = asyncio.create_task(c._every(0.01, boom, "test"))
        while len(calls) < 3:
            await asyncio.sleep(0.01)
        task.cancel()
        return len(calls)

    assert asyncio.run(go()) >= 3

def test_malformed_feed_record_does_not_block_startup(settings, rng, feed_factory):
    records = [{"name": "x", "github_stars": "12"}, {"name": "y", "github_stars": {"count": 3}}]

    async def go():
        c = DataCollector(settings, feed=feed_factory(records), rng=rng)
        await c.start(Channel())
        await c.stop()
        return c

    c = asyncio.run(go())
    assert c.mcp_source == SOURCE_PULSEMCP
    assert [s.reviews for s in c.mcp_servers] == [12, 0]

def test_transform_failure_falls_back_to_synthetic(settings, rng, feed_factory, monkeypatch):
    def explode(records, rng=None):
        raise RuntimeError("bad page")
    monkeypatch.setattr("backend.collector.transform_servers", explode)

    c = DataCollector(settings, feed=feed_factory([{"name": "x"}]), rng=rng)
    asyncio.run(c.refresh())
    assert c.mcp_source == SOURCE_SYNTHETIC
    assert len(c.mcp_servers) == 20

def test_failed_first_refresh_still_starts_with_synthetic_data(settings, rng):
    async def broken_feed():
        raise RuntimeError("feed exploded")

    async def go():
        c = DataCollector(settings, feed=broken_feed, rng=rng)
        await c.start(Channel())
        await c.stop()
        return c

    c = asyncio.run(go())
    assert c.mcp_source == SOURCE_SYNTHETIC
    assert len(c.mcp_servers) == 20
    assert len(c.api_services) == 20
    assert c.last_updated is not None
