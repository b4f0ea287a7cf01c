import streamlit as st
from lib.api import DashboardAPIError
from lib.data import load_server, search_rankings
from lib.source import SOURCES, data_source

st.set_page_config(page_title="Server Details · MCP Server Trends", page_icon="🔎", layout="wide")
source = data_source()
st.title("Server Details")

# Find by search term, then pick one
term = st.text_input(f"Search {SOURCES[source]}", placeholder="name, author, tag…")
server_id = st.query_params.get("id", "")
if term:
    try:
        hits = search_rankings(term, source)
    except DashboardAPIError as e:
        st.error(f"Search failed: {e}")
        st.stop()
    if hits.empty:
        st.info(f"No {SOURCES[source]} match '{term}'.")
    else:
        options = dict(zip(hits["name"], hits["id"]))
        server_id = options[st.selectbox("Matches", list(options))]

if not server_id:
    st.write("Search for a server above, or open this page with `?id=<server id>`.")
    st.stop()

try:
    s = load_server(server_id)
except DashboardAPIError as e:
    st.error(str(e))
    st.stop()

st.header(s["name"])
st.caption(f"{s.get('author') or s.get('provider')} · v{s['version'].lstrip('v')} · {s['category']}")
st.write(s["description"])

popularity = "downloads" if "downloads" in s else "requests"
quality = "rating" if "rating" in s else "uptime"
secondary = "reviews" if "reviews" in s else "latency"
col1, col2, col3, col4 = st.columns(4)
col1.metric(popularity.capitalize(), f"{s[popularity]:,}")
col2.metric(quality.capitalize(), f"{s[quality]}")
col3.metric(secondary.capitalize(), f"{s[secondary]:,}" + (" ms" if secondary == "latency" else ""))
col4.metric("Growth", f"{(s.get('growth_rate') or 0):+.1f}%")

if s.get("tags"):
    st.markdown(" ".join(f"`{t}`" for t in s["tags"]))
link = s.get("repository") or s.get("documentation")
if link:
    st.markdown(f"[{'Source' if 'repository' in s else 'Documentation'}]({link})")
st.caption(f"Last updated {s['last_updated']} · id `{s['id']}`")
