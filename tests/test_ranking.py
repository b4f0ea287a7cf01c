from __future__ import annotations
import random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from backend.models import APIService, MCPServer
from backend.ranking import category_stats, classify_trend, rank_entities, resolve_metric
from backend.synthetic import generate_api_services, generate_mcp_servers

def mcp(id, downloads, growth=0.0, category="Database", rating=4.0, reviews=0):
    return MCPServer(id=id, name=id, description="", author="a", version="1.0.0",
                     downloads=downloads, rating=rating, reviews=reviews,
                     category=category, growth_rate=growth)

@pytest.mark.parametrize("growth,trend", [
    (6.0, "up"), (-6.0, "down"), (0.0, "stable"), (5.0, "stable"), (-5.0, "stable"), (None, "stable"),
])
def test_classify_trend(growth, trend):
    assert classify_trend(growth) == trend

def test_rank_entities_sorts_descending_and_numbers_ranks(rng):
    ranked = rank_entities(generate_mcp_servers(rng), "downloads", rng)
    values = [r.server.downloads for r in ranked]
    assert values == sorted(values, reverse=True)
    assert [r.rank for r in ranked] == list(range(1, 21))
    for r in ranked:
        assert r.score == round(r.server.downloads / 1000)
        assert -2 <= r.change <= 2
        assert r.trend == classify_trend(r.server.growth_rate)

def test_latency_ranks_ascending(rng):
    ranked = rank_entities(generate_api_services(rng), "latency", rng)
    values = [r.server.latency for r in ranked]
    assert values == sorted(values)

def test_ties_keep_input_order():
    items = [mcp("a", 10), mcp("b", 20), mcp("c", 10), mcp("d", 20)]
    assert [r.server.id for r in rank_entities(items, "downloads")] == ["b", "d", "a", "c"]

def test_rank_entities_does_not_mutate_input():
    items = [mcp("a", 1), mcp("b", 2)]
    rank_entities(items, "downloads")
    assert [i.id for i in items] == ["a", "b"]

def test_missing_growth_sorts_as_zero():
    items = [mcp("a", 1, growth=None), mcp("b", 1, growth=-3.0), mcp("c", 1, growth=2.0)]
    assert [r.server.id for r in rank_entities(items, "growth_rate")] == ["c", "a", "b"]

def test_resolve_metric():
    assert resolve_metric("mcp", None) == "downloads"
    assert resolve_metric("api", None) == "requests"
    assert resolve_metric("mcp", "growth") == "growth_rate"
    assert resolve_metric("api", "latency") == "latency"
    with pytest.raises(ValueError):
        resolve_metric("mcp", "latency")
    with pytest.raises(ValueError):
        resolve_metric("npm", None)

def test_category_stats():
    items = [mcp("a", 100, category="Database"), mcp("b", 300, category="Database"), mcp("c", 500, category="AI/ML")]
    assert category_stats(items, "downloads") == [
        {"category": "AI/ML", "count": 1, "total": 500, "average": 500},
        {"category": "Database", "count": 2, "total": 400, "average": 200},
    ]

@given(values=st.lists(st.integers(min_value=0, max_value=10**7), max_size=60))
@settings(max_examples=100)
def test_rank_order_property(values):
    """Adjacent entries are ordered by the metric and rank is position + 1."""
    items = [mcp(f"s{i}", v) for i, v in enumerate(values)]
    ranked = rank_entities(items, "downloads", random.Random(0))
    for i, r in enumerate(ranked):
        assert r.rank == i + 1
    for a, b in zip(ranked, ranked[1:]):
        assert a.server.downloads >= b.server.downloads
