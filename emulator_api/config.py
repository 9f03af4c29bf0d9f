from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


_TRUTHY = {"1", "true", "yes", "y", "on"}


def _env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _get_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    return default if raw is None else raw.lower() in _TRUTHY


def _get_number(name: str, default, cast):
    raw = _env(name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Game client language; selects the countdown engage line.
    language: str

    # Replay scheduler period. Defaults to one 60 Hz display frame.
    tick_interval_seconds: float

    # Timeline engine webhook (empty = do not forward notifications)
    timeline_webhook_url: str
    timeline_posting_enabled: bool

    # Startup
    marker_selftest_enabled: bool

    # General
    log_level: str
    port: int
    environment: str

    @staticmethod
    def from_env() -> "Settings":
        tick = _get_number("TICK_INTERVAL_SECONDS", 1.0 / 60.0, float)
        if tick <= 0:
            tick = 1.0 / 60.0

        return Settings(
            language=(os.getenv("EMULATOR_LANGUAGE") or "en").strip().lower() or "en",
            tick_interval_seconds=tick,
            timeline_webhook_url=(os.getenv("TIMELINE_WEBHOOK_URL") or "").strip(),
            timeline_posting_enabled=_get_bool("TIMELINE_POSTING_ENABLED", True),
            marker_selftest_enabled=_get_bool("MARKER_SELFTEST_ENABLED", True),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
            port=_get_number("PORT", 8080, int),
            environment=(os.getenv("ENVIRONMENT") or os.getenv("ENV") or "stage").strip() or "stage",
        )
