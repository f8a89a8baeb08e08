from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import yaml

from scenarios.types import ScenarioConfig


def _repo_root() -> Path:
    # .../backend/scenarios/registry.py -> repo root is 2 levels up
    return Path(__file__).resolve().parents[2]


def scenarios_root() -> Path:
    override = (os.getenv("GEOCLUSTER_SCENARIOS_DIR") or "").strip()
    return Path(override) if override else _repo_root() / "scenarios"


@dataclass(frozen=True)
class ScenarioEntry:
    config: ScenarioConfig
    # Absolute path to scenario.yaml on disk (useful for debugging).
    path: Path

    def source_path(self) -> Path:
        p = Path(self.config.source.path)
        return p if p.is_absolute() else self.path.parent / p


class ScenarioNotFoundError(LookupError):
    pass


def _iter_scenario_yaml_files(root: Path) -> Iterable[Path]:
    if not root.exists():
        return []
    # Convention: scenarios/*/scenario.yaml
    return root.glob("*/scenario.yaml")


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid scenario yaml root: {path}")
    return data


@lru_cache(maxsize=8)
def _load_registry(root: str) -> dict[str, ScenarioEntry]:
    out: dict[str, ScenarioEntry] = {}
    for p in sorted(_iter_scenario_yaml_files(Path(root)), key=lambda x: str(x)):
        cfg = ScenarioConfig.model_validate(_load_yaml(p))
        if cfg.id in out:
            raise ValueError(f"Duplicate scenario id {cfg.id!r}: {p}")
        out[cfg.id] = ScenarioEntry(config=cfg, path=p.resolve())
    return out


def get_registry() -> dict[str, ScenarioEntry]:
    return _load_registry(str(scenarios_root()))


def list_scenarios() -> list[ScenarioConfig]:
    return [e.config for e in get_registry().values() if e.config.enabled]


def get_scenario(scenario_id: str) -> ScenarioEntry:
    sid = (scenario_id or "").strip()
    entry = get_registry().get(sid)
    if entry is None or not entry.config.enabled:
        raise ScenarioNotFoundError(f"Unknown scenario: {scenario_id!r}")
    return entry


def clear_registry_cache() -> None:
    """
    Clear in-memory scenario registry cache.

    Useful during development: scenario YAML changes are otherwise not picked up until
    the backend process restarts.
    """
    _load_registry.cache_clear()
