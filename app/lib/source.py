from __future__ import annotations
import streamlit as st

SOURCES = {"mcp": "MCP servers", "api": "API services"}

# per-source column labels
LABELS = {
    "mcp": {"popularity": "downloads", "quality": "rating", "owner": "author", "reviewed": "reviews"},
    "api": {"popularity": "requests", "quality": "uptime", "owner": "provider", "reviewed": "uptime"},
}

def data_source() -> str:
    """Sidebar toggle between MCP servers and API services, shared by all pages."""
    if "data_source" not in st.session_state:
        st.session_state["data_source"] = "mcp"
    st.sidebar.radio(
        "Data source",
        options=list(SOURCES),
        format_func=SOURCES.get,
        key="data_source",
    )
    return st.session_state["data_source"]

def labels(source: str) -> dict:
    return LABELS[source]

def synthetic_banner(source: str, overview: dict | None = None) -> None:
    if source == "api" or (overview or {}).get("mcp_source") == "synthetic":
        st.sidebar.warning("Synthetic data: metrics are generated placeholders, not real usage.")
