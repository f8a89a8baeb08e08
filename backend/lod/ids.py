from __future__ import annotations


# Cluster ids pack (source index, zoom + 1) above the point count:
#   id = (source_index << 5) + (zoom + 1) + n_points
ZOOM_BITS = 5
MAX_ZOOM = (1 << ZOOM_BITS) - 2


def encode_cluster_id(source_index: int, zoom: int, n_points: int) -> int:
    if not 0 <= zoom <= MAX_ZOOM:
        raise ValueError(f"zoom {zoom} does not fit the cluster id encoding (0..{MAX_ZOOM})")
    if source_index < 0:
        raise ValueError(f"source index must be >= 0, got {source_index}")
    return (source_index << ZOOM_BITS) + (zoom + 1) + n_points


def origin_index(cluster_id: int, n_points: int) -> int:
    """
    Position of the seed node in the index the cluster was built from.
    """
    return (cluster_id - n_points) >> ZOOM_BITS


def origin_zoom(cluster_id: int, n_points: int) -> int:
    """
    Zoom of the index holding the seed node (the cluster's own zoom + 1).
    """
    return (cluster_id - n_points) % (1 << ZOOM_BITS)
