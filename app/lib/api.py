from __future__ import annotations
import os
import uuid
from typing import Any, Dict, Optional

import httpx

API_BASE_URL = os.environ.get("MCP_DASHBOARD_API_URL", "http://localhost:5000/api")
RANKING_ENDPOINTS = ("top", "fastest-growing", "most-downloaded", "most-reviewed")


class DashboardAPIError(RuntimeError):
    pass


class DashboardAPI:
    """Thin client for the dashboard backend's JSON envelope API."""

    def __init__(self, base_url: str = API_BASE_URL, client: Optional[httpx.Client] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout, headers={"Content-Type": "application/json"})

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params = {k: v for k, v in (params or {}).items() if v not in (None, "")}
        try:
            r = self._client.get(
                f"{self.base_url}{path}",
                params=params,
                headers={"x-request-id": uuid.uuid4().hex[:8]},
            )
            body = r.json()
        except httpx.HTTPError as e:
            raise DashboardAPIError(f"backend unreachable: {e}") from e
        except ValueError as e:
            raise DashboardAPIError(f"non-json response from {path}") from e
        if r.status_code >= 400 or not body.get("success"):
            raise DashboardAPIError(body.get("message") or f"HTTP {r.status_code} from {path}")
        return body

    def rankings(self, endpoint: str, kind: str = "mcp", **params) -> Dict[str, Any]:
        if endpoint not in RANKING_ENDPOINTS:
            raise ValueError(f"unknown ranking endpoint '{endpoint}'")
        return self._get(f"/servers/{endpoint}", {"type": kind, **params})

    def search(self, term: str, kind: str = "mcp", **params) -> Dict[str, Any]:
        return self._get("/servers/search", {"type": kind, "search": term, **params})

    def server(self, server_id: str) -> Dict[str, Any]:
        return self._get(f"/servers/{server_id}")["data"]

    def analytics(self, view: str = "overview") -> Dict[str, Any]:
        return self._get(f"/analytics/{view}")["data"]

    def health(self) -> Dict[str, Any]:
        return self._get("/health")["data"]
