"""
Fetch MCP server records from the PulseMCP REST API.

The feed is optional: any failure degrades to an empty result so the
collector can fall back to synthetic data.
"""
from __future__ import annotations
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from app.common import HTTPX_LIMITS, HTTPX_TIMEOUT, USER_AGENT
from backend.config import PULSEMCP_URL

async def iter_servers(
    client: httpx.AsyncClient,
    url: str = PULSEMCP_URL,
    max_pages: int = 1,
) -> AsyncIterator[Dict[str, Any]]:
    """Yield server objects across pages using the 'next' URL."""
    next_url: Optional[str] = url
    pages = 0
    while next_url and pages < max_pages:
        logging.info(f"Fetching {next_url}…")
        r = await client.get(next_url)
        r.raise_for_status()
        data = r.json()
        servers = data.get("servers") if isinstance(data, dict) else None
        if not isinstance(servers, list):
            raise ValueError("unexpected payload: no 'servers' array")
        for s in servers:
            if isinstance(s, dict):
                yield s
        pages += 1
        next_url = data.get("next")

def feed_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """Client for the feed; `timeout` overrides the read/write/pool budget only."""
    return httpx.AsyncClient(
        limits=HTTPX_LIMITS,
        transport=httpx.AsyncHTTPTransport(retries=0),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        timeout=HTTPX_TIMEOUT if timeout is None else httpx.Timeout(timeout, connect=HTTPX_TIMEOUT.connect),
    )

async def fetch_servers(
    client: Optional[httpx.AsyncClient] = None,
    *,
    url: str = PULSEMCP_URL,
    timeout: Optional[float] = None,
    max_pages: int = 1,
) -> List[Dict[str, Any]]:
    """Return raw PulseMCP server records, or [] on any failure."""
    try:
        if client is not None:
            servers = [s async for s in iter_servers(client, url, max_pages)]
        else:
            async with feed_client(timeout) as own_client:
                servers = [s async for s in iter_servers(own_client, url, max_pages)]
    except httpx.HTTPStatusError as e:
        logging.warning(f"PulseMCP returned HTTP {e.response.status_code}; using fallback data")
        return []
    except httpx.HTTPError as e:
        logging.warning(f"PulseMCP request failed: {type(e).__name__}: {e}; using fallback data")
        return []
    except ValueError as e:
        # json.JSONDecodeError is a ValueError subclass
        logging.warning(f"PulseMCP payload could not be parsed: {e}; using fallback data")
        return []

    if not servers:
        logging.warning("PulseMCP returned empty or invalid data")
        return []
    logging.info(f"Fetched {len(servers)} MCP servers from PulseMCP")
    return servers
