from __future__ import annotations

from layers.loaders import load_geojson_points
from layers.types import PointFeature
from scenarios.registry import ScenarioEntry, get_scenario


def load_scenario_points(scenario: str | ScenarioEntry) -> list[PointFeature]:
    """
    Load the scenario-configured point source from disk.
    """
    entry = scenario if isinstance(scenario, ScenarioEntry) else get_scenario(scenario)
    cfg = entry.config

    path = entry.source_path()
    if not path.exists():
        raise FileNotFoundError(f"Scenario '{cfg.id}' missing file: {cfg.source.path}")

    if cfg.source.type == "geojson_points":
        return load_geojson_points(path)
    raise ValueError(f"Unknown source type: {cfg.source.type}")
