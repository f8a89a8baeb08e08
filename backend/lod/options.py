from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable

from lod.ids import MAX_ZOOM


PropsMap = Callable[[dict[str, Any]], dict[str, Any]]
PropsReduce = Callable[[dict[str, Any], dict[str, Any]], None]


def _identity(props: dict[str, Any]) -> dict[str, Any]:
    return props


@dataclass(frozen=True)
class ClusterOptions:
    """
    Pyramid build options; fixed for the lifetime of an index.

    `radius` is in the same pixel units as `extent`. `map` turns a point's properties
    into the record fed to `reduce`; `reduce(acc, props)` folds one record into a
    cluster's accumulator in place.
    """

    extent: int = 512
    radius: float = 40
    min_zoom: int = 0
    max_zoom: int = 16
    min_points: int = 2
    node_size: int = 64
    generate_id: bool = False
    map: PropsMap = field(default=_identity, repr=False)
    reduce: PropsReduce | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not 0 <= self.min_zoom <= self.max_zoom <= MAX_ZOOM:
            raise ValueError(
                f"zoom bounds must satisfy 0 <= min_zoom <= max_zoom <= {MAX_ZOOM}, "
                f"got min_zoom={self.min_zoom} max_zoom={self.max_zoom}"
            )
        if self.node_size < 1:
            raise ValueError(f"node_size must be >= 1, got {self.node_size}")
        if self.extent <= 0:
            raise ValueError(f"extent must be > 0, got {self.extent}")
        if self.radius < 0:
            raise ValueError(f"radius must be >= 0, got {self.radius}")

    def zoom_radius(self, zoom: int) -> float:
        """
        Merge radius at `zoom` in unit-plane coordinates.
        """
        return self.radius / (self.extent * 2**zoom)

    def limit_zoom(self, zoom: float) -> int:
        return max(self.min_zoom, min(int(math.floor(zoom)), self.max_zoom + 1))
