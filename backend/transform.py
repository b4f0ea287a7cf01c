"""
Normalize raw PulseMCP server records into MCPServer entities.

Growth rates derived here are estimates from star counts, with random
jitter inside each bucket. They are not reproducible unless a seeded
random.Random is passed in.
"""
from __future__ import annotations
import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Set

from app.common import now_iso, slugify
from backend.models import MCP, MCPServer, coerce_category

# (category, name keywords, description keywords); first match wins
CATEGORY_RULES = [
    ("AI/ML", ("ai", "llm"), ("ai",)),
    ("Database", ("db", "database"), ("database",)),
    ("Integration", ("api", "http"), ("api",)),
    ("File System", ("file", "fs"), ("file",)),
    ("Development Tools", ("git", "github"), ("git",)),
    ("Cloud Services", ("cloud", "aws"), ("cloud",)),
    ("Communication", ("chat", "slack"), ("communication",)),
    ("Security", ("auth", "security"), ("auth",)),
]
DEFAULT_CATEGORY = "Utilities"
NO_DESCRIPTION = "No description available"

POPULAR_STARS = 100
MAX_TAGS = 3

def raw_description(record: Dict[str, Any]) -> str:
    return str(record.get("short_description")
               or record.get("ai_generated_short_description")
               or "")

def as_count(value: Any) -> int:
    """Non-negative int from a feed number; strings are parsed, junk counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError, OverflowError):
        return 0

def infer_category(name: Optional[str], description: Optional[str]) -> str:
    name = (name or "").lower()
    desc = (description or "").lower()
    for category, name_keys, desc_keys in CATEGORY_RULES:
        if any(k in name for k in name_keys) or any(k in desc for k in desc_keys):
            return category
    return DEFAULT_CATEGORY

def extract_tags(record: Dict[str, Any]) -> List[str]:
    tags: List[str] = []
    if record.get("package_registry"):
        tags.append(str(record["package_registry"]))
    if as_count(record.get("github_stars")) > POPULAR_STARS:
        tags.append("popular")
    name = record.get("name")
    if name:
        tags.extend(t for t in str(name).lower().split("-")[:2] if t)
    return tags[:MAX_TAGS]

def growth_from_stars(stars: Optional[int], rng: Optional[random.Random] = None) -> float:
    """Bucket a star count into a rough growth percentage."""
    rng = rng or random
    if not stars:
        return 0.0
    if stars > 1000:
        return 15 + rng.random() * 10
    if stars > 500:
        return 10 + rng.random() * 10
    if stars > 100:
        return 5 + rng.random() * 10
    return rng.random() * 10

def package_author(record: Dict[str, Any]) -> str:
    package = str(record.get("package_name") or "")
    if record.get("package_registry") == "npm" and package.startswith("@"):
        return package.split("/")[0][1:] or "Unknown"
    return "Unknown"

def transform_server(record: Dict[str, Any], index: int, rng: Optional[random.Random] = None) -> MCPServer:
    rng = rng or random
    raw_name = str(record["name"]) if record.get("name") else ""
    # categorize from the feed's own text, never the placeholder
    description = raw_description(record)
    stars = as_count(record.get("github_stars"))
    return MCPServer(
        id=f"mcp-{slugify(raw_name)}" if raw_name else f"mcp-{index}",
        name=raw_name or f"Unknown Server {index}",
        description=description or NO_DESCRIPTION,
        author=package_author(record),
        version=str(record.get("latest_version") or "1.0.0"),
        downloads=as_count(record.get("package_download_count")) or rng.randrange(50000),
        rating=round(min(5.0, 3 + stars / 1000), 2) if stars else 4.0,
        reviews=stars,
        category=(coerce_category(str(record["category"]), MCP) if record.get("category")
                  else infer_category(raw_name, description)),
        tags=extract_tags(record),
        repository=str(record.get("source_code_url") or record.get("url") or ""),
        last_updated=str(record.get("updated_at") or now_iso()),
        growth_rate=round(growth_from_stars(stars, rng), 1),
    )

def transform_servers(records: Iterable[Dict[str, Any]], rng: Optional[random.Random] = None) -> List[MCPServer]:
    """Transform a feed page, suffixing ids that collide within the list.

    A record that still fails to transform is logged and skipped.
    """
    servers: List[MCPServer] = []
    issued: Set[str] = set()
    for i, record in enumerate(records):
        try:
            s = transform_server(record, i, rng)
        except (TypeError, ValueError, AttributeError) as e:
            logging.warning(f"Skipping malformed PulseMCP record #{i}: {type(e).__name__}: {e}")
            continue
        base, n = s.id, 1
        while s.id in issued:
            n += 1
            s.id = f"{base}-{n}"
        issued.add(s.id)
        servers.append(s)
    return servers
