import streamlit as st
from lib.api import API_BASE_URL, DashboardAPIError
from lib.data import get_api
from lib.source import data_source

st.set_page_config(
    page_title="MCP Server Trends",
    page_icon="📡",
    layout="wide"
)

st.title("MCP Server Trends")

data_source()

try:
    health = get_api().health()
    st.sidebar.success(f"Backend {health['status']} · {health['environment']} · up {health['uptime'] / 60:.0f} min")
except DashboardAPIError as e:
    st.sidebar.error(f"Backend unavailable at {API_BASE_URL}: {e}")

st.info(
    "Rankings are refreshed every **5 minutes**. MCP servers come from the PulseMCP directory when it is "
    "reachable; API services and growth figures are **synthetic placeholders**."
)

st.markdown("""
### 📊 Pages
- **Dashboard** → KPIs + top 10 + category breakdown
- **Fastest Growing** → ranked by growth rate
- **Most Downloaded** → ranked by downloads / requests
- **Most Reviewed** → ranked by reviews / uptime
- **Server Details** → look up a single server or API
- **Claude Integration** → connect MCP servers to Claude Desktop and the CLI
- **About** → where the numbers come from

---

Use the sidebar to switch between **MCP servers** and **API services**; every page follows the selection.
""")
