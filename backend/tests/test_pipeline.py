from __future__ import annotations

import math

from geo.index import PointIndex
from layers.types import PointFeature
from lod.ids import encode_cluster_id
from lod.nodes import ClusterNode
from lod.options import ClusterOptions
from lod.pipeline import build_pyramid, cluster_zoom, leaf_nodes, props_mapper


def test_build_pyramid_has_one_index_per_zoom():
    opts = ClusterOptions(min_zoom=2, max_zoom=6)
    trees = build_pyramid([PointFeature(lon=1.0, lat=1.0)], opts)
    assert sorted(trees) == [2, 3, 4, 5, 6, 7]


def test_carried_nodes_are_shared_between_levels():
    points = [PointFeature(lon=-60.0, lat=0.0), PointFeature(lon=60.0, lat=0.0)]
    trees = build_pyramid(points, ClusterOptions(max_zoom=3))

    raw = trees[4].points
    for z in range(3, -1, -1):
        assert [id(n) for n in trees[z].points] == [id(n) for n in raw]
    # Claimed by every pass down to zoom 0.
    assert all(n.zoom == 0 for n in raw)


def test_pass_claims_neighbors_in_place():
    points = [
        PointFeature(lon=0.0, lat=0.0),
        PointFeature(lon=0.0001, lat=0.0),
        PointFeature(lon=90.0, lat=0.0),
    ]
    opts = ClusterOptions()
    nodes = leaf_nodes(points)
    tree = PointIndex(nodes, node_size=opts.node_size)

    out = cluster_zoom(
        tree, 10, options=opts, n_points=len(points), props_of=props_mapper(points, opts)
    )

    expected_id = encode_cluster_id(0, 10, len(points))
    cluster, far = out
    assert cluster.is_cluster
    assert cluster.id == expected_id
    assert cluster.num_points == 2
    assert cluster.zoom == math.inf
    assert cluster.x == (nodes[0].x + nodes[1].x) / 2
    assert nodes[0].parent_id == nodes[1].parent_id == expected_id
    assert nodes[0].zoom == nodes[1].zoom == 10

    # Nothing to merge with: the very same node object moves on.
    assert far is nodes[2]
    assert far.parent_id == -1


def test_cluster_centroid_is_weighted_by_point_count():
    opts = ClusterOptions()
    a = ClusterNode.cluster(0.5, 0.5, 1000, 3, {})
    b = ClusterNode.leaf(0.5 + 1e-6, 0.5, 0)
    tree = PointIndex([a, b])

    (merged,) = cluster_zoom(
        tree, 8, options=opts, n_points=1, props_of=props_mapper([PointFeature(0.0, 0.0)], opts)
    )
    assert merged.num_points == 4
    assert merged.x == (0.5 * 3 + (0.5 + 1e-6)) / 4
    assert a.parent_id == b.parent_id == merged.id
