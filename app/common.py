"""
Common utilities and constants used across the project.
"""
from __future__ import annotations
import datetime as dt
import json, pathlib, re
from typing import Any, Dict, Iterable

import httpx

DATA_DIR = pathlib.Path("data")
RUNS_DIR = DATA_DIR / "runs"

DEFAULT_TIMEOUT = 10.0  # seconds
USER_AGENT = "mcp-server-trends/0.2 (+https://github.com/phunold/MCP-server-trends)"
API_VERSION = "1.0.0"

HTTPX_TIMEOUT = httpx.Timeout(DEFAULT_TIMEOUT, connect=5.0)
HTTPX_LIMITS = httpx.Limits(max_connections=10, max_keepalive_connections=5)

def ensure_dir(p: pathlib.Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)

def now_iso() -> str:
    # UTC ISO8601 zulu
    return utcnow().strftime("%Y-%m-%dT%H:%M:%SZ")

def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())

def write_jsonl(path: pathlib.Path, rows: Iterable[Dict[str, Any]]) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False) + "\n")

def read_jsonl(path: pathlib.Path) -> Iterable[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)
