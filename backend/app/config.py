"""Runtime settings read from the environment (optionally via backend/.env)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent
DEFAULT_STATIC_DIR = BACKEND_DIR.parent / "static"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("[config] %s=%r is not an integer; using %d", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    static_dir: Path = DEFAULT_STATIC_DIR
    cors_allow_origins: tuple[str, ...] = ("*",)
    leaderboard_size: int = 10
    outbox_size: int = 64
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        origins = tuple(
            o.strip() for o in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
        )
        static_dir = os.environ.get("STATIC_DIR", "").strip()
        return cls(
            host=os.environ.get("HOST", "").strip() or "0.0.0.0",
            port=_int_env("PORT", 8080),
            static_dir=Path(static_dir) if static_dir else DEFAULT_STATIC_DIR,
            cors_allow_origins=origins or ("*",),
            leaderboard_size=_int_env("LEADERBOARD_SIZE", 10),
            outbox_size=_int_env("OUTBOX_SIZE", 64),
            log_level=os.environ.get("LOG_LEVEL", "").strip().upper() or "INFO",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
