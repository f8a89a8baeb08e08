from __future__ import annotations

from typing import Any, Sequence

from engine.features import cluster_properties
from geo.index import PointIndex
from geo.projection import lat_y, lng_x
from geo.tiles import TileWindow, tile_query_windows, to_tile_pixel
from layers.types import PointFeature, Tile, TileFeature
from lod.options import ClusterOptions


def render_tile(
    tree: PointIndex,
    points: Sequence[PointFeature],
    *,
    z: int,
    x: int,
    y: int,
    options: ClusterOptions,
) -> Tile | None:
    """
    Render tile z/x/y from the zoom's index; None when nothing falls in its padded window.
    """
    padding = options.radius / options.extent
    features: list[TileFeature] = []
    for window in tile_query_windows(z, x, y, padding):
        features.extend(
            _window_features(tree, points, window, z2=2**z, y=y, options=options)
        )
    return Tile(features=features) if features else None


def _window_features(
    tree: PointIndex,
    points: Sequence[PointFeature],
    window: TileWindow,
    *,
    z2: int,
    y: int,
    options: ClusterOptions,
) -> list[TileFeature]:
    ids = tree.range(window.min_x, window.min_y, window.max_x, window.max_y)

    out: list[TileFeature] = []
    for i in ids:
        node = tree.points[i]
        fid: Any = None

        if node.is_cluster:
            tags = cluster_properties(node)
            px, py = node.x, node.y
            fid = node.id
        else:
            p = points[node.index]
            tags = p.props
            # Leaves render from their original coordinates.
            px, py = lng_x(p.lon), lat_y(p.lat)
            if options.generate_id:
                fid = node.index
            elif p.id is not None:
                fid = p.id

        geometry = [
            to_tile_pixel(px, py, z2=z2, x=window.origin_x, y=y, extent=options.extent)
        ]
        out.append(TileFeature(geometry=geometry, tags=tags, id=fid))
    return out
