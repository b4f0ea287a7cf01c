"""
Run the dashboard backend.

Usage:
  python -m backend --port 5000
  APP_ENV=production USE_REAL_DATA=false python -m backend
"""
from __future__ import annotations
import argparse
import dataclasses
import logging

import uvicorn

from backend.api import create_app
from backend.config import Settings
from backend.logs import setup_logging

def main():
    settings = Settings.from_env()
    ap = argparse.ArgumentParser(description="Serve MCP server and API service rankings.")
    ap.add_argument("--host", default=settings.host)
    ap.add_argument("--port", type=int, default=settings.port)
    ap.add_argument("--synthetic", action="store_true", help="Skip the PulseMCP feed; serve synthetic data only.")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    settings = dataclasses.replace(
        settings,
        host=args.host,
        port=args.port,
        use_real_data=settings.use_real_data and not args.synthetic,
        log_level="DEBUG" if args.verbose else settings.log_level,
    )
    setup_logging(settings.log_level)
    logging.info(f"Server starting on {settings.host}:{settings.port} ({settings.environment})")

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)

if __name__ == "__main__":
    main()
