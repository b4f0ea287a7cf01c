"""
Backend for the MCP server trends dashboard: data collection, rankings and the REST API.
"""
__version__ = "0.2.0"
