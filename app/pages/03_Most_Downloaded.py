import streamlit as st
from lib.views import ranking_page

st.set_page_config(page_title="Most Downloaded · MCP Server Trends", page_icon="📦", layout="wide")

ranking_page("most-downloaded", "Most Downloaded", "popularity")
