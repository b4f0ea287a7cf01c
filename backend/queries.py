"""
Read-only views over the collector's current snapshot, used by the HTTP layer.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from statistics import mean
from typing import Any, Dict, List, Optional

from backend.collector import DataCollector
from backend.models import API, KINDS, MCP, Entity, RankedEntry
from backend.ranking import PRIMARY_METRIC, category_stats, classify_trend, rank_entities, resolve_metric

MOST_REVIEWED_METRIC = {MCP: "reviews", API: "uptime"}

@dataclass
class Page:
    items: List[RankedEntry]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}

def matches(entity: Entity, term: str) -> bool:
    term = term.lower()
    haystack = [entity.name, entity.description, entity.owner, *entity.tags]
    return any(term in (h or "").lower() for h in haystack)

def filter_entities(entities: List[Entity], category: Optional[str] = None, search: Optional[str] = None) -> List[Entity]:
    out = entities
    if category:
        out = [e for e in out if e.category.lower() == category.lower()]
    if search:
        out = [e for e in out if matches(e, search)]
    return out


class Queries:
    def __init__(self, collector: DataCollector) -> None:
        self.collector = collector

    def rankings(
        self,
        kind: str = MCP,
        sort_by: Optional[str] = None,
        page: int = 1,
        limit: int = 100,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Page:
        metric = resolve_metric(kind, sort_by)
        entities = filter_entities(self.collector.entities(kind), category, search)
        ranked = rank_entities(entities, metric, self.collector.rng)
        start = (page - 1) * limit
        return Page(items=ranked[start:start + limit], total=len(ranked), page=page, limit=limit)

    def top(self, kind: str = MCP, sort_by: Optional[str] = None, **kw) -> Page:
        return self.rankings(kind, sort_by, **kw)

    def fastest_growing(self, kind: str = MCP, **kw) -> Page:
        return self.rankings(kind, "growth_rate", **kw)

    def most_downloaded(self, kind: str = MCP, **kw) -> Page:
        return self.rankings(kind, PRIMARY_METRIC[kind], **kw)

    def most_reviewed(self, kind: str = MCP, **kw) -> Page:
        return self.rankings(kind, MOST_REVIEWED_METRIC[kind], **kw)

    def search(self, term: str, kind: str = MCP, sort_by: Optional[str] = None, **kw) -> Page:
        if not term or not term.strip():
            raise ValueError("Search query is required")
        return self.rankings(kind, sort_by, search=term.strip(), **kw)

    def get_entity(self, entity_id: str, kind: Optional[str] = None) -> Optional[Entity]:
        for k in ([kind] if kind else KINDS):
            for e in self.collector.entities(k):
                if e.id == entity_id:
                    return e
        return None

    def analytics(self) -> Dict[str, Any]:
        c = self.collector
        mcp, api = c.entities(MCP), c.entities(API)
        return {
            "overview": {
                "total_mcp_servers": len(mcp),
                "total_api_services": len(api),
                "total_mcp_downloads": sum(s.downloads for s in mcp),
                "total_api_requests": sum(s.requests for s in api),
                "avg_mcp_rating": round(mean(s.rating for s in mcp), 2) if mcp else 0.0,
                "avg_api_uptime": round(mean(s.uptime for s in api), 3) if api else 0.0,
                "last_updated": c.last_updated,
                "mcp_source": c.mcp_source,
            },
            "top_categories": {
                MCP: category_stats(mcp, PRIMARY_METRIC[MCP]),
                API: category_stats(api, PRIMARY_METRIC[API]),
            },
            "growth": {MCP: growth_summary(mcp), API: growth_summary(api)},
        }

def growth_summary(entities: List[Entity]) -> Dict[str, Any]:
    rates = [e.growth_rate for e in entities if e.growth_rate is not None]
    trends = {"up": 0, "down": 0, "stable": 0}
    for e in entities:
        trends[classify_trend(e.growth_rate)] += 1
    return {
        "average": round(mean(rates), 1) if rates else 0.0,
        "max": max(rates) if rates else 0.0,
        "min": min(rates) if rates else 0.0,
        "trends": trends,
    }
