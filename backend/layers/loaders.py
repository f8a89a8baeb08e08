from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from shapely.geometry import shape

from layers.types import PointFeature


def load_geojson_points(path: Path) -> list[PointFeature]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return features_from_geojson(data)


def features_from_geojson(data: dict[str, Any]) -> list[PointFeature]:
    """
    GeoJSON FeatureCollection -> point features, in input order.

    - Features with a null/empty geometry are kept without coordinates (they are
      dropped from clustering at load time).
    - Non-Point geometries and Points with malformed coordinates are skipped.
    """
    features = (data or {}).get("features") or []

    out: list[PointFeature] = []
    for feature in features:
        feature = feature or {}
        props = feature.get("properties") or {}
        fid = feature.get("id")
        geom = feature.get("geometry")

        if not geom or not geom.get("coordinates"):
            out.append(PointFeature(lon=None, lat=None, props=props, id=fid))
            continue

        try:
            g = shape(geom)
            if g.geom_type != "Point" or g.is_empty:
                continue
            lon, lat = float(g.x), float(g.y)
        except (ValueError, TypeError):
            # malformed coordinates
            continue

        out.append(PointFeature(lon=lon, lat=lat, props=props, id=fid))

    return out
