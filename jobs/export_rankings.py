"""
Run one refresh cycle and write the ranked MCP server and API service lists to JSONL.

Usage:
  uv run jobs/export_rankings.py \
    --out data/runs/2025-09-06/rankings.jsonl

Optional:
  uv run jobs/export_rankings.py --synthetic --top 25 \
    --out data/runs/2025-09-06/rankings.jsonl
"""
from __future__ import annotations
import argparse
import asyncio
import dataclasses
import logging
import pathlib
from typing import Any, Dict, List

from app.common import RUNS_DIR, now_iso, write_jsonl
from backend.collector import DataCollector
from backend.config import Settings
from backend.logs import setup_logging
from backend.models import API, MCP
from backend.ranking import PRIMARY_METRIC, rank_entities

def export_rows(collector: DataCollector, top: int) -> List[Dict[str, Any]]:
    exported_at = now_iso()
    rows = []
    for kind in (MCP, API):
        source = collector.mcp_source if kind == MCP else "synthetic"
        for entry in rank_entities(collector.entities(kind), PRIMARY_METRIC[kind], collector.rng)[:top]:
            rows.append({"type": kind, "source": source, "exported_at": exported_at, **entry.asdict()})
    return rows

def main():
    ap = argparse.ArgumentParser(description="Export one snapshot of the rankings.")
    ap.add_argument("--out", type=pathlib.Path, default=RUNS_DIR / now_iso()[:10] / "rankings.jsonl",
                    help="Output JSONL file (default: data/runs/<today>/rankings.jsonl)")
    ap.add_argument("--top", type=int, default=100, help="How many entries per list to keep.")
    ap.add_argument("--synthetic", action="store_true", help="Skip the PulseMCP feed.")
    args = ap.parse_args()

    settings = Settings.from_env()
    if args.synthetic:
        settings = dataclasses.replace(settings, use_real_data=False)
    setup_logging(settings.log_level)

    collector = DataCollector(settings)
    asyncio.run(collector.refresh())
    rows = export_rows(collector, args.top)

    write_jsonl(args.out, rows)
    logging.info(f"Wrote {len(rows)} ranked rows ({collector.mcp_source} MCP data) → {args.out}")

if __name__ == "__main__":
    main()
