import streamlit as st
from lib.views import ranking_page

st.set_page_config(page_title="Most Reviewed · MCP Server Trends", page_icon="⭐", layout="wide")

# API services carry no reviews; they are ranked by uptime instead
ranking_page("most-reviewed", "Most Reviewed", "reviewed")
