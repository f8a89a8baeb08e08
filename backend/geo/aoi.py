from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BBox:
    """
    WGS84 bounding box in lon/lat degrees.

    Convention used throughout this repo:
    - minLon, minLat, maxLon, maxLat (west, south, east, north)
    - min_lon > max_lon is allowed after `wrapped()` and means the box crosses the antimeridian
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_sequence(cls, bbox) -> "BBox":
        west, south, east, north = (float(v) for v in bbox)
        return cls(min_lon=west, min_lat=south, max_lon=east, max_lat=north)

    @classmethod
    def parse(cls, raw: str) -> "BBox":
        """
        Parse "west,south,east,north".
        """
        parts = [p.strip() for p in (raw or "").split(",")]
        if len(parts) != 4:
            raise ValueError(f"bbox must have 4 comma-separated numbers, got {raw!r}")
        return cls.from_sequence(parts)

    def wrapped(self) -> "BBox":
        """
        Longitudes wrapped into [-180, 180), latitudes clamped to [-90, 90].

        A box spanning 360 degrees or more becomes the whole globe. An east edge of
        exactly 180 stays 180 instead of wrapping to -180.
        """
        min_lat = max(-90.0, min(90.0, self.min_lat))
        max_lat = max(-90.0, min(90.0, self.max_lat))

        if self.max_lon - self.min_lon >= 360.0:
            return BBox(min_lon=-180.0, min_lat=min_lat, max_lon=180.0, max_lat=max_lat)

        min_lon = _wrap_lon(self.min_lon)
        max_lon = 180.0 if self.max_lon == 180.0 else _wrap_lon(self.max_lon)
        return BBox(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    @property
    def crosses_antimeridian(self) -> bool:
        return self.min_lon > self.max_lon

    def split_antimeridian(self) -> tuple["BBox", "BBox"]:
        """
        (eastern, western) halves of a box crossing the antimeridian.
        """
        east = BBox(min_lon=self.min_lon, min_lat=self.min_lat, max_lon=180.0, max_lat=self.max_lat)
        west = BBox(min_lon=-180.0, min_lat=self.min_lat, max_lon=self.max_lon, max_lat=self.max_lat)
        return east, west

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)


def _wrap_lon(lon: float) -> float:
    return ((lon + 180.0) % 360.0) - 180.0
