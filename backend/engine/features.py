from __future__ import annotations

from typing import Any, Sequence

from geo.projection import x_lng, y_lat
from geo.tiles import round_half_away
from layers.types import ClusterFeature, PointFeature
from lod.nodes import ClusterNode


def abbreviate_count(count: int) -> int | str:
    """
    1234 -> "1.2k", 23456 -> "23k", small counts stay ints.
    """
    if count >= 10000:
        return f"{round_half_away(count / 1000)}k"
    if count >= 1000:
        return f"{round_half_away(count / 100) / 10:g}k"
    return count


def cluster_properties(node: ClusterNode) -> dict[str, Any]:
    return {
        **(node.props or {}),
        "cluster": True,
        "cluster_id": node.id,
        "point_count": node.num_points,
        "point_count_abbreviated": abbreviate_count(node.num_points),
    }


def cluster_feature(node: ClusterNode) -> ClusterFeature:
    return ClusterFeature(
        id=int(node.id),
        lon=x_lng(node.x),
        lat=y_lat(node.y),
        point_count=node.num_points,
        props=cluster_properties(node),
    )


def node_feature(
    node: ClusterNode, points: Sequence[PointFeature]
) -> ClusterFeature | PointFeature:
    """
    Aggregates become cluster features; leaves resolve to the original input point.
    """
    if node.is_cluster:
        return cluster_feature(node)
    return points[node.index]
