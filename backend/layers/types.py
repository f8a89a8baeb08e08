from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PointFeature:
    """
    An input point with its property record.

    `lon`/`lat` are None when the source feature had no geometry; such features are
    never clustered.
    """

    lon: float | None
    lat: float | None
    props: dict[str, Any] = field(default_factory=dict)
    # Caller-supplied stable identifier (GeoJSON `id`), if any.
    id: Any = None

    @property
    def has_geometry(self) -> bool:
        return self.lon is not None and self.lat is not None

    def to_geojson(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": "Feature",
            "properties": self.props,
            "geometry": (
                {"type": "Point", "coordinates": [self.lon, self.lat]}
                if self.has_geometry
                else None
            ),
        }
        if self.id is not None:
            out["id"] = self.id
        return out


@dataclass(frozen=True)
class ClusterFeature:
    """
    An aggregate of two or more input points, as returned by cluster queries.

    `props` carries the reduced properties plus `cluster`, `cluster_id`, `point_count`
    and `point_count_abbreviated`.
    """

    id: int
    lon: float
    lat: float
    point_count: int
    props: dict[str, Any]

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "id": self.id,
            "properties": self.props,
            "geometry": {"type": "Point", "coordinates": [self.lon, self.lat]},
        }


@dataclass(frozen=True)
class TileFeature:
    # [(px, py)] in tile-local pixels.
    geometry: list[tuple[int, int]]
    tags: dict[str, Any]
    id: Any = None
    # Point geometry (vector tile geometry type 1).
    type: int = 1

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.type,
            "geometry": [list(p) for p in self.geometry],
            "tags": self.tags,
        }
        if self.id is not None:
            out["id"] = self.id
        return out


@dataclass(frozen=True)
class Tile:
    features: list[TileFeature]

    def to_dict(self) -> dict[str, Any]:
        return {"features": [f.to_dict() for f in self.features]}


def feature_collection(features) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": [f.to_geojson() for f in features]}
