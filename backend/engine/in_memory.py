from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from engine.supercluster import ClusterIndex
from layers.load_scenario import load_scenario_points
from scenarios.registry import get_scenario
from telemetry.config import log_timings_enabled
from telemetry.singleton import get_store
from telemetry.store import TelemetryObserver
from telemetry.timers import CompositeObserver, LoggingObserver, NullObserver, PhaseObserver


def get_index(scenario_id: str) -> ClusterIndex:
    """
    Clustered index for a scenario, built on first use and kept in memory.
    """
    entry = get_scenario(scenario_id)
    return _build(entry.config.id, entry.path)


@lru_cache(maxsize=4)
def _build(scenario_id: str, _yaml_path: Path) -> ClusterIndex:
    # `_yaml_path` is part of the cache key so a different scenarios dir rebuilds.
    entry = get_scenario(scenario_id)
    points = load_scenario_points(entry)
    index = ClusterIndex(
        entry.config.clustering.to_options(), observer=_observer_for(scenario_id)
    )
    return index.load(points)


def _observer_for(scenario_id: str) -> PhaseObserver:
    observers: list[PhaseObserver] = []
    if log_timings_enabled():
        observers.append(LoggingObserver())
    store = get_store()
    if store is not None:
        observers.append(TelemetryObserver(store, scenario_id))
    if not observers:
        return NullObserver()
    if len(observers) == 1:
        return observers[0]
    return CompositeObserver(*observers)


def clear_index_cache() -> None:
    _build.cache_clear()
