import streamlit as st
from lib.views import ranking_page

st.set_page_config(page_title="Fastest Growing · MCP Server Trends", page_icon="🚀", layout="wide")

ranking_page(
    "fastest-growing", "Fastest Growing", "growth_rate",
    blurb="Growth rates are estimated from star counts or synthetic snapshots; treat them as indicative only.",
)
