from __future__ import annotations

import math
from typing import Iterable, Sequence

from engine.features import node_feature
from engine.tile import render_tile
from engine.types import ClusterNotFoundError
from geo.aoi import BBox
from geo.index import PointIndex
from geo.projection import lat_y, lng_x
from layers.types import ClusterFeature, PointFeature, Tile
from lod.ids import origin_index, origin_zoom
from lod.options import ClusterOptions
from lod.pipeline import build_pyramid
from telemetry.timers import NullObserver, PhaseObserver

Feature = ClusterFeature | PointFeature


class ClusterIndex:
    """
    Multi-zoom point clustering for map rendering.

    `load` builds one static index per zoom, from `max_zoom + 1` (raw points) down to
    `min_zoom`, each level clustering the previous one. Everything after `load` is a
    read-only query against that pyramid.

    Usage:
        index = ClusterIndex(ClusterOptions(radius=60)).load(points)
        index.get_clusters(3, (-180, -85, 180, 85))
    """

    def __init__(
        self,
        options: ClusterOptions | None = None,
        *,
        observer: PhaseObserver | None = None,
    ) -> None:
        self.options = options or ClusterOptions()
        self.observer = observer or NullObserver()
        self.points: list[PointFeature] = []
        self.trees: dict[int, PointIndex] = {}

    def load(self, features: Iterable[PointFeature]) -> "ClusterIndex":
        """
        Replace the point store and rebuild the whole pyramid.

        Features without geometry are left out of the point store.
        """
        self.observer.start("total time")
        self.points = [f for f in features if f.has_geometry]
        self.trees = build_pyramid(self.points, self.options, observer=self.observer)
        self.observer.stop("total time")
        return self

    def get_tree(self, zoom: float, limit: bool = True) -> PointIndex:
        z = self.options.limit_zoom(zoom) if limit else int(zoom)
        tree = self.trees.get(z)
        if tree is None:
            raise ClusterNotFoundError(f"Index not found for zoom {z}")
        return tree

    def get_clusters(self, zoom: float, bbox: BBox | Sequence[float]) -> list[Feature]:
        """
        Clusters and points inside `bbox` (west, south, east, north) at `zoom`.

        A box crossing the antimeridian is answered as its eastern half followed by its
        western half; features on the seam may show up in both.
        """
        box = bbox if isinstance(bbox, BBox) else BBox.from_sequence(bbox)
        box = box.wrapped()

        if box.crosses_antimeridian:
            east, west = box.split_antimeridian()
            return self.get_clusters(zoom, east) + self.get_clusters(zoom, west)

        tree = self.get_tree(zoom)
        ids = tree.range(
            lng_x(box.min_lon), lat_y(box.max_lat), lng_x(box.max_lon), lat_y(box.min_lat)
        )
        return [node_feature(tree.points[i], self.points) for i in ids]

    def get_children(self, cluster_id: int) -> list[Feature]:
        n = len(self.points)
        oid = origin_index(cluster_id, n)
        oz = origin_zoom(cluster_id, n)

        tree = self.trees.get(oz)
        if tree is None:
            raise ClusterNotFoundError(f"Index not found for zoom {oz}")
        if not 0 <= oid < len(tree.points):
            raise ClusterNotFoundError(f"No cluster with the specified id {cluster_id}")

        origin = tree.points[oid]
        # The radius the cluster was merged with, one zoom above its seed's index.
        r = self.options.zoom_radius(oz - 1)

        children = [
            node_feature(tree.points[i], self.points)
            for i in tree.within(origin.x, origin.y, r)
            if tree.points[i].parent_id == cluster_id
        ]
        if not children:
            raise ClusterNotFoundError(f"Cluster {cluster_id} has no children")
        return children

    def get_cluster_expansion_zoom(self, cluster_id: int) -> int:
        """
        The zoom at which the cluster first splits into more than one child.
        """
        expansion_zoom = origin_zoom(cluster_id, len(self.points)) - 1
        while expansion_zoom <= self.options.max_zoom:
            children = self.get_children(cluster_id)
            expansion_zoom += 1
            if len(children) != 1 or not isinstance(children[0], ClusterFeature):
                break
            cluster_id = children[0].id
        return expansion_zoom

    def get_leaves(
        self, cluster_id: int, limit: int | None = 10, offset: int = 0
    ) -> list[PointFeature]:
        """
        Original points under a cluster, depth first, skipping `offset` and returning at
        most `limit` (None for all).
        """
        if limit is not None and limit <= 0:
            return []
        leaves: list[PointFeature] = []
        self._append_leaves(
            leaves, cluster_id, math.inf if limit is None else limit, max(0, offset), 0
        )
        return leaves

    def get_tile(self, z: int, x: int, y: int) -> Tile | None:
        return render_tile(
            self.get_tree(z), self.points, z=z, x=x, y=y, options=self.options
        )

    def _append_leaves(
        self,
        result: list[PointFeature],
        cluster_id: int,
        limit: float,
        offset: int,
        skipped: int,
    ) -> int:
        for child in self.get_children(cluster_id):
            if isinstance(child, ClusterFeature):
                if skipped + child.point_count <= offset:
                    # skip the whole cluster
                    skipped += child.point_count
                else:
                    skipped = self._append_leaves(result, child.id, limit, offset, skipped)
            elif skipped < offset:
                skipped += 1
            else:
                result.append(child)

            if len(result) >= limit:
                break

        return skipped
