from __future__ import annotations

from typing import Any, Callable, Sequence

from geo.index import PointIndex
from geo.projection import lat_y, lng_x
from layers.types import PointFeature
from lod.ids import encode_cluster_id
from lod.nodes import ClusterNode
from lod.options import ClusterOptions
from telemetry.timers import NullObserver, PhaseObserver


PropsOf = Callable[..., dict[str, Any]]


def props_mapper(points: Sequence[PointFeature], options: ClusterOptions) -> PropsOf:
    """
    Build `props_of(node, clone=False)`: the record a node contributes to `reduce`.

    Aggregates contribute their reduced properties; leaves contribute
    `options.map(point.props)`. With `clone=True` the result is safe to use as an
    accumulator (never the input feature's own dict).
    """

    def props_of(node: ClusterNode, clone: bool = False) -> dict[str, Any]:
        if node.is_cluster:
            props = node.props or {}
            return dict(props) if clone else props
        original = points[node.index].props
        result = options.map(original)
        return dict(result) if clone and result is original else result

    return props_of


def leaf_nodes(points: Sequence[PointFeature]) -> list[ClusterNode]:
    return [
        ClusterNode.leaf(lng_x(p.lon), lat_y(p.lat), i)
        for i, p in enumerate(points)
        if p.has_geometry
    ]


def cluster_zoom(
    tree: PointIndex,
    zoom: int,
    *,
    options: ClusterOptions,
    n_points: int,
    props_of: PropsOf,
) -> list[ClusterNode]:
    """
    One greedy clustering pass: the nodes of `tree` (built for zoom + 1) -> nodes at `zoom`.

    Nodes are visited in index order; each unclaimed node claims every unclaimed
    neighbor within the zoom radius. Claimed nodes are mutated in place.
    """
    r = options.zoom_radius(zoom)
    nodes = tree.points
    out: list[ClusterNode] = []

    for i, p in enumerate(nodes):
        # Already claimed earlier in this pass.
        if p.zoom <= zoom:
            continue
        p.zoom = zoom

        neighbor_ids = tree.within(p.x, p.y, r)

        num_points_origin = p.num_points
        num_points = num_points_origin
        for nid in neighbor_ids:
            b = nodes[nid]
            if b.zoom > zoom:
                num_points += b.num_points

        if num_points > num_points_origin and num_points >= options.min_points:
            wx = p.x * num_points_origin
            wy = p.y * num_points_origin

            cluster_props = (
                props_of(p, clone=True)
                if options.reduce is not None and num_points_origin > 1
                else None
            )

            cluster_id = encode_cluster_id(i, zoom, n_points)

            for nid in neighbor_ids:
                b = nodes[nid]
                if b.zoom <= zoom:
                    continue
                b.zoom = zoom

                wx += b.x * b.num_points
                wy += b.y * b.num_points
                b.parent_id = cluster_id

                if options.reduce is not None:
                    if cluster_props is None:
                        cluster_props = props_of(p, clone=True)
                    options.reduce(cluster_props, props_of(b))

            p.parent_id = cluster_id
            out.append(
                ClusterNode.cluster(
                    wx / num_points, wy / num_points, cluster_id, num_points, cluster_props or {}
                )
            )
        else:
            out.append(p)

            # Keep unmerged neighbors visible at this zoom.
            if num_points > 1:
                for nid in neighbor_ids:
                    b = nodes[nid]
                    if b.zoom <= zoom:
                        continue
                    b.zoom = zoom
                    out.append(b)

    return out


def build_pyramid(
    points: Sequence[PointFeature],
    options: ClusterOptions,
    *,
    observer: PhaseObserver | None = None,
) -> dict[int, PointIndex]:
    """
    Build one index per zoom, from max_zoom + 1 (raw points) down to min_zoom.
    """
    obs = observer or NullObserver()
    props_of = props_mapper(points, options)
    n_points = len(points)

    prepare = f"prepare {n_points} points"
    obs.start(prepare)
    nodes = leaf_nodes(points)
    trees: dict[int, PointIndex] = {
        options.max_zoom + 1: PointIndex(nodes, node_size=options.node_size)
    }
    obs.stop(prepare)

    for z in range(options.max_zoom, options.min_zoom - 1, -1):
        phase = f"z{z}"
        obs.start(phase)
        nodes = cluster_zoom(
            trees[z + 1], z, options=options, n_points=n_points, props_of=props_of
        )
        trees[z] = PointIndex(nodes, node_size=options.node_size)
        obs.stop(phase, f"{len(nodes)} clusters")

    return trees
