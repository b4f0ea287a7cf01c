"""
Entity and ranking types shared by the collector, the ranking engine and the API.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, ClassVar, Dict, Optional, Union

MCP = "mcp"
API = "api"
KINDS = (MCP, API)

MCP_CATEGORIES = (
    "AI/ML", "Database", "Integration", "File System", "Development Tools",
    "Cloud Services", "Cloud Storage", "Communication", "Security", "Payment",
    "DevOps", "Monitoring", "Search", "Utilities",
)
API_CATEGORIES = (
    "AI/ML", "Payment", "Geolocation", "Communication", "Cloud Storage",
    "Development", "Authentication", "Media", "Search", "Monitoring",
    "Analytics", "CMS", "E-commerce", "Finance", "Other",
)

# free-text category aliases seen in third-party listings
CATEGORY_ALIASES = {
    "development": "Development Tools",
    "dev-tools": "Development Tools",
    "db": "Database",
    "metrics": "Analytics",
    "auth": "Security",
    "messaging": "Communication",
    "utility": "Utilities",
    "utils": "Utilities",
    "api": "Integration",
    "observability": "Monitoring",
    "ml": "AI/ML",
    "ai": "AI/ML",
    "machine-learning": "AI/ML",
}

def coerce_category(value: Optional[str], kind: str = MCP) -> str:
    """Map free text onto the fixed category vocabulary of `kind`."""
    vocabulary = MCP_CATEGORIES if kind == MCP else API_CATEGORIES
    fallback = vocabulary[-1]
    if not value:
        return fallback
    text = value.strip()
    for c in vocabulary:
        if c.lower() == text.lower():
            return c
    alias = CATEGORY_ALIASES.get(text.lower())
    if kind == API and alias == "Development Tools":
        alias = "Development"
    if kind == API and alias == "Security":
        alias = "Authentication"
    return alias if alias in vocabulary else fallback


@dataclass
class MCPServer:
    kind: ClassVar[str] = MCP

    id: str
    name: str
    description: str
    author: str
    version: str
    downloads: int
    rating: float
    reviews: int
    category: str
    tags: list[str] = field(default_factory=list)
    repository: str = ""
    last_updated: str = ""
    growth_rate: Optional[float] = None

    @property
    def owner(self) -> str:
        return self.author

    def asdict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class APIService:
    kind: ClassVar[str] = API

    id: str
    name: str
    description: str
    provider: str
    version: str
    requests: int
    uptime: float
    latency: int                 # milliseconds, lower is better
    category: str
    tags: list[str] = field(default_factory=list)
    documentation: str = ""
    last_updated: str = ""
    growth_rate: Optional[float] = None

    @property
    def owner(self) -> str:
        return self.provider

    def asdict(self) -> Dict[str, Any]:
        return asdict(self)


Entity = Union[MCPServer, APIService]


@dataclass
class RankedEntry:
    rank: int
    server: Entity
    score: int
    change: int      # decorative noise, not a historical rank delta
    trend: str       # "up" | "down" | "stable"

    def asdict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "server": self.server.asdict(),
            "score": self.score,
            "change": self.change,
            "trend": self.trend,
        }
