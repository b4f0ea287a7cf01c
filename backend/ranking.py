"""
Ranking engine: sort entities by a metric and annotate rank, score, change and trend.
"""
from __future__ import annotations
import random
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence

from backend.models import API, MCP, Entity, RankedEntry

TREND_THRESHOLD = 5.0
LOWER_IS_BETTER = {"latency"}

METRICS = {
    MCP: ("downloads", "rating", "reviews", "growth_rate"),
    API: ("requests", "uptime", "latency", "growth_rate"),
}
PRIMARY_METRIC = {MCP: "downloads", API: "requests"}
METRIC_ALIASES = {"growth": "growth_rate"}

def resolve_metric(kind: str, sort_by: Optional[str]) -> str:
    if kind not in METRICS:
        raise ValueError(f"unknown type '{kind}'")
    if not sort_by:
        return PRIMARY_METRIC[kind]
    metric = METRIC_ALIASES.get(sort_by, sort_by)
    if metric not in METRICS[kind]:
        raise ValueError(f"cannot sort {kind} entries by '{sort_by}'")
    return metric

def metric_value(entity: Entity, metric: str) -> float:
    return getattr(entity, metric, None) or 0

def classify_trend(growth: Optional[float]) -> str:
    if growth is None:
        return "stable"
    if growth > TREND_THRESHOLD:
        return "up"
    if growth < -TREND_THRESHOLD:
        return "down"
    return "stable"

def rank_entities(entities: Sequence[Entity], metric: str, rng: Optional[random.Random] = None) -> List[RankedEntry]:
    """Rank a copy of `entities` by `metric`; ties keep their input order.

    `change` is random noise in [-2, 2] standing in for a rank delta; no
    rank history is kept.
    """
    rng = rng or random
    ordered = sorted(
        entities,
        key=lambda e: metric_value(e, metric),
        reverse=metric not in LOWER_IS_BETTER,
    )
    return [
        RankedEntry(
            rank=i + 1,
            server=e,
            score=round(metric_value(e, metric) / 1000),
            change=rng.randint(-2, 2),
            trend=classify_trend(e.growth_rate),
        )
        for i, e in enumerate(ordered)
    ]

def category_stats(entities: Sequence[Entity], metric: str) -> List[Dict[str, Any]]:
    per_cat = defaultdict(lambda: {"count": 0, "total": 0})
    for e in entities:
        d = per_cat[e.category]
        d["count"] += 1
        d["total"] += metric_value(e, metric)
    rows = [
        {"category": c, "count": d["count"], "total": d["total"], "average": round(d["total"] / d["count"])}
        for c, d in per_cat.items()
    ]
    return sorted(rows, key=lambda r: r["total"], reverse=True)
