from __future__ import annotations
import streamlit as st, altair as alt

from .api import DashboardAPIError
from .data import load_rankings
from .source import SOURCES, data_source, labels, synthetic_banner

PAGE_SIZE = 25

def ranking_page(endpoint: str, title: str, metric: str, blurb: str = "") -> None:
    """Shared layout for the ranked list pages: filters, bar chart, paged table."""
    source = data_source()
    lbl = labels(source)
    metric = lbl.get(metric, metric)
    synthetic_banner(source)

    st.title(f"{title} {SOURCES[source]}")
    if blurb:
        st.caption(blurb)

    col1, col2 = st.columns([3, 1])
    category = col1.text_input("Category filter", placeholder="e.g. Database")
    page = col2.number_input("Page", min_value=1, value=1, step=1)

    try:
        df, pagination = load_rankings(endpoint, source, limit=PAGE_SIZE, page=int(page), category=category or None)
    except DashboardAPIError as e:
        st.error(f"Could not load rankings: {e}")
        st.stop()

    if df.empty:
        st.info("Nothing matches these filters.")
        return

    chart = (
        alt.Chart(df.head(15))
        .mark_bar()
        .encode(x=alt.X(f"{metric}:Q", title=metric.replace("_", " ").capitalize()),
                y=alt.Y("name:N", sort="-x" if metric != "latency" else "x", title=None),
                color=alt.Color("trend:N", scale=alt.Scale(domain=["up", "stable", "down"],
                                                           range=["#2e7d32", "#9e9e9e", "#c62828"])),
                tooltip=["rank", "name", f"{metric}:Q", "trend"])
        .properties(height=380)
    )
    st.altair_chart(chart, use_container_width=True)

    cols = ["rank", "name", lbl["owner"], "category", metric, "growth_rate", "trend", "change", "id"]
    st.dataframe(df[list(dict.fromkeys(c for c in cols if c in df.columns))], use_container_width=True, hide_index=True)
    st.caption(f"Page {pagination.get('page', 1)} of {pagination.get('pages', 1)} · {pagination.get('total', len(df))} entries. "
               "Rank change is a display placeholder, not a historical comparison.")
