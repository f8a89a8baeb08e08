from __future__ import annotations

import os
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _flag(name: str, default: str) -> bool:
    v = (os.getenv(name) or default).strip().lower()
    return v not in {"0", "false", "no", "off", ""}


def telemetry_path() -> Path:
    # Store under repo so it's easy to share/query (and stays local).
    return Path(
        os.getenv("GEOCLUSTER_TELEMETRY_PATH")
        or (_repo_root() / "data" / "telemetry" / "telemetry.duckdb")
    )


def telemetry_enabled() -> bool:
    return _flag("GEOCLUSTER_TELEMETRY", "0")


def log_timings_enabled() -> bool:
    return _flag("GEOCLUSTER_LOG_TIMINGS", "0")
