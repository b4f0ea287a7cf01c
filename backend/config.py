"""
Environment-driven settings for the backend.
"""
from __future__ import annotations
import os
from dataclasses import dataclass

from app.common import DEFAULT_TIMEOUT

PULSEMCP_URL = "https://api.pulsemcp.com/v0beta/servers"

def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")

@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = "http://localhost:8501"
    pulsemcp_url: str = PULSEMCP_URL
    feed_timeout: float = DEFAULT_TIMEOUT
    feed_max_pages: int = 1
    use_real_data: bool = True
    refresh_interval: float = 300.0   # slow cycle, seconds
    metrics_interval: float = 5.0     # fast cycle, seconds
    broadcast_top_n: int = 10
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cors_origins(self) -> list[str]:
        if self.is_production:
            return [self.frontend_url]
        return [self.frontend_url, "http://localhost:3000", "http://localhost:8501"]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.environ.get("APP_ENV", "development"),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", 5000)),
            frontend_url=os.environ.get("FRONTEND_URL", "http://localhost:8501"),
            pulsemcp_url=os.environ.get("PULSEMCP_URL", PULSEMCP_URL),
            feed_timeout=float(os.environ.get("FEED_TIMEOUT", DEFAULT_TIMEOUT)),
            feed_max_pages=int(os.environ.get("FEED_MAX_PAGES", 1)),
            use_real_data=_env_bool("USE_REAL_DATA", True),
            refresh_interval=float(os.environ.get("REFRESH_INTERVAL", 300)),
            metrics_interval=float(os.environ.get("METRICS_INTERVAL", 5)),
            broadcast_top_n=int(os.environ.get("BROADCAST_TOP_N", 10)),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )
