from __future__ import annotations
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from .api import DashboardAPI

RANK_COLUMNS = ["rank", "name", "category", "trend", "change", "score", "growth_rate"]

@st.cache_resource
def get_api() -> DashboardAPI:
    return DashboardAPI()

def rankings_frame(entries: List[Dict[str, Any]]) -> pd.DataFrame:
    """Flatten ranked entries ({rank, server, score, change, trend}) into one row each."""
    if not entries:
        return pd.DataFrame(columns=RANK_COLUMNS)
    rows = []
    for e in entries:
        server = dict(e.get("server") or {})
        server["tags"] = ", ".join(server.get("tags") or [])
        rows.append({**server, "rank": e.get("rank"), "score": e.get("score"),
                     "change": e.get("change"), "trend": e.get("trend")})
    df = pd.DataFrame(rows)
    if "last_updated" in df.columns:
        df["last_updated"] = pd.to_datetime(df["last_updated"], errors="coerce", utc=True)
    front = [c for c in RANK_COLUMNS if c in df.columns]
    return df[front + [c for c in df.columns if c not in front]]

def categories_frame(stats: List[Dict[str, Any]]) -> pd.DataFrame:
    if not stats:
        return pd.DataFrame(columns=["category", "count", "total", "average"])
    return pd.DataFrame(stats).sort_values("total", ascending=False)

# Cached loaders (the backend refreshes every few minutes; keep pages snappy)
@st.cache_data(ttl=30, show_spinner=False)
def load_rankings(endpoint: str, kind: str, limit: int = 100, page: int = 1, category: str | None = None) -> tuple[pd.DataFrame, dict]:
    body = get_api().rankings(endpoint, kind, limit=limit, page=page, category=category)
    return rankings_frame(body["data"]), body.get("pagination") or {}

@st.cache_data(ttl=60, show_spinner=False)
def load_analytics() -> dict:
    return get_api().analytics("overview")

@st.cache_data(ttl=120, show_spinner=False)
def search_rankings(term: str, kind: str, limit: int = 50) -> pd.DataFrame:
    return rankings_frame(get_api().search(term, kind, limit=limit)["data"])

@st.cache_data(ttl=600, show_spinner=False)
def load_server(server_id: str) -> dict:
    return get_api().server(server_id)
