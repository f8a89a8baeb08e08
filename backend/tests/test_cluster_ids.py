import pytest

from lod.ids import MAX_ZOOM, encode_cluster_id, origin_index, origin_zoom
from lod.options import ClusterOptions


def test_decoding_recovers_origin_index_and_zoom():
    for source_index, zoom, n in [(0, 0, 0), (37, 5, 1000), (12345, 16, 7), (3, MAX_ZOOM, 2)]:
        cid = encode_cluster_id(source_index, zoom, n)
        assert origin_index(cid, n) == source_index
        # The origin zoom is the zoom of the index the seed lived in (one finer).
        assert origin_zoom(cid, n) == zoom + 1


def test_ids_never_collide_with_point_indexes():
    n = 500
    assert encode_cluster_id(0, 0, n) > n - 1


def test_zoom_outside_the_encoding_is_rejected():
    with pytest.raises(ValueError):
        encode_cluster_id(1, MAX_ZOOM + 1, 10)
    with pytest.raises(ValueError):
        encode_cluster_id(1, -1, 10)
    with pytest.raises(ValueError):
        encode_cluster_id(-1, 3, 10)


def test_options_reject_zoom_bounds_that_overflow_ids():
    assert ClusterOptions(max_zoom=MAX_ZOOM).max_zoom == 30
    with pytest.raises(ValueError):
        ClusterOptions(max_zoom=31)
    with pytest.raises(ValueError):
        ClusterOptions(min_zoom=5, max_zoom=4)
    with pytest.raises(ValueError):
        ClusterOptions(node_size=0)


def test_limit_zoom_clamps_and_floors():
    opts = ClusterOptions(min_zoom=2, max_zoom=10)
    assert opts.limit_zoom(0) == 2
    assert opts.limit_zoom(5.7) == 5
    assert opts.limit_zoom(11) == 11
    assert opts.limit_zoom(25) == 11


def test_zoom_radius_halves_per_zoom():
    opts = ClusterOptions(radius=40, extent=512)
    assert opts.zoom_radius(0) == pytest.approx(40 / 512)
    assert opts.zoom_radius(3) == pytest.approx(opts.zoom_radius(2) / 2)
