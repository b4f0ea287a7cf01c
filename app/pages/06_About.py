import streamlit as st

st.set_page_config(page_title="About · MCP Server Trends", page_icon="ℹ️", layout="wide")
st.title("About")

st.markdown("""
**MCP Server Trends** ranks Model Context Protocol (MCP) servers and popular API services.

### Where the numbers come from
- **MCP servers**: the [PulseMCP](https://www.pulsemcp.com/) directory, fetched every 5 minutes.
  Categories are inferred from names and descriptions; growth is **estimated from GitHub stars**.
  When PulseMCP is unreachable, a synthetic list of well-known servers is shown instead.
- **API services**: always **synthetic**. Request counts, uptime and latency are generated around
  realistic base values and change on every refresh.

### How rankings work
- Lists are sorted by the chosen metric (latency ascending, everything else descending).
- **Trend** is *up* above +5 % growth, *down* below −5 %, otherwise *stable*.
- **Score** is the metric scaled down by 1,000.
- **Change** is a display placeholder; no rank history is kept.

### Live updates
Clients connected to `/ws` that send `{"type": "subscribe"}` receive a `data-update`
with the top 10 of each list after every refresh, and a `metrics-update` with totals every 5 seconds.
""")
