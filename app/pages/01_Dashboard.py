import streamlit as st, altair as alt
from lib.api import DashboardAPIError
from lib.data import categories_frame, load_analytics, load_rankings
from lib.source import SOURCES, data_source, labels, synthetic_banner

st.set_page_config(page_title="Dashboard · MCP Server Trends", page_icon="📊", layout="wide")
source = data_source()
lbl = labels(source)
st.title(f"{SOURCES[source]} Dashboard")

try:
    analytics = load_analytics()
    top, _ = load_rankings("top", source, limit=10)
except DashboardAPIError as e:
    st.error(f"Could not load data: {e}")
    st.stop()

overview = analytics["overview"]
synthetic_banner(source, overview)

# KPIs
col1, col2, col3, col4 = st.columns(4)
if source == "mcp":
    col1.metric("MCP servers", f"{overview['total_mcp_servers']:,}")
    col2.metric("Total downloads", f"{overview['total_mcp_downloads']:,}")
    col3.metric("Average rating", f"{overview['avg_mcp_rating']:.2f}")
else:
    col1.metric("API services", f"{overview['total_api_services']:,}")
    col2.metric("Total requests", f"{overview['total_api_requests']:,}")
    col3.metric("Average uptime", f"{overview['avg_api_uptime']:.2f}%")
growth = analytics["growth"][source]
col4.metric("Average growth", f"{growth['average']:+.1f}%", help=f"{growth['trends']['up']} trending up")

st.caption(f"Last refresh: {overview['last_updated']} · MCP source: {overview['mcp_source']}")

# Top 10
st.subheader("Top 10")
if top.empty:
    st.write("No entries yet.")
else:
    st.dataframe(
        top[["rank", "name", lbl["owner"], "category", lbl["popularity"], lbl["quality"], "growth_rate", "trend"]],
        use_container_width=True, hide_index=True,
    )

# Category breakdown (aggregated)
st.subheader(f"Categories by total {lbl['popularity']}")
cats = categories_frame(analytics["top_categories"][source])
if cats.empty:
    st.write("No category data yet.")
else:
    bar = (
        alt.Chart(cats)
        .mark_bar()
        .encode(x=alt.X("category:N", sort="-y", title="Category"),
                y=alt.Y("total:Q", title=lbl["popularity"].capitalize()),
                tooltip=["category", "count", "total", "average"])
        .properties(height=300)
    )
    st.altair_chart(bar, use_container_width=True)

trends = growth["trends"]
st.subheader("Trend distribution")
pie = (
    alt.Chart(alt.Data(values=[{"trend": k, "count": v} for k, v in trends.items()]))
    .mark_arc()
    .encode(theta="count:Q", color="trend:N", tooltip=["trend:N", "count:Q"])
    .properties(height=260)
)
st.altair_chart(pie, use_container_width=True)
