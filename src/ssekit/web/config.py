"""Web server configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class WebConfig:
    """Configuration for the web server."""

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] | None = None
    tick_interval: float = 0.0  # seconds between demo ticks, 0 disables
    max_pending_chunks: int = 100
    debug: bool = False

    @classmethod
    def load(cls) -> WebConfig:
        config = cls()
        config.host = os.environ.get("SSEKIT_HOST", config.host)
        config.port = int(os.environ.get("SSEKIT_PORT", config.port))
        config.tick_interval = float(os.environ.get("SSEKIT_TICK_INTERVAL", config.tick_interval))
        config.max_pending_chunks = int(
            os.environ.get("SSEKIT_MAX_PENDING_CHUNKS", config.max_pending_chunks)
        )
        config.debug = os.environ.get("SSEKIT_DEBUG", "").lower() in ("1", "true")
        origins = os.environ.get("SSEKIT_CORS_ORIGINS")
        if origins:
            config.cors_origins = [o.strip() for o in origins.split(",")]
        return config
