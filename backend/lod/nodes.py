from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class ClusterNode:
    """
    A node of the zoom pyramid: either a leaf (one input point) or an aggregate.

    Nodes are shared by reference between zoom levels. A node carried forward to a
    coarser level is the same object the finer level's index holds, so claiming it
    (`zoom`, `parent_id`) is visible from every level that references it.
    """

    x: float
    y: float
    # Last zoom this node was processed at; inf until a clustering pass claims it.
    zoom: float = math.inf
    parent_id: int = -1
    # Point store position (leaves only).
    index: int = -1
    # Aggregates only.
    id: int | None = None
    num_points: int = 1
    props: dict[str, Any] | None = None

    @property
    def is_cluster(self) -> bool:
        return self.id is not None

    @classmethod
    def leaf(cls, x: float, y: float, index: int) -> "ClusterNode":
        return cls(x=x, y=y, index=index)

    @classmethod
    def cluster(
        cls, x: float, y: float, cluster_id: int, num_points: int, props: dict[str, Any]
    ) -> "ClusterNode":
        return cls(x=x, y=y, id=cluster_id, num_points=num_points, props=props)
