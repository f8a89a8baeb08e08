from __future__ import annotations

import random
from operator import itemgetter

import pytest

from geo.index import PointIndex
from lod.nodes import ClusterNode


def _random_points(n: int, seed: int) -> list[tuple[float, float]]:
    rng = random.Random(seed)
    # Duplicates on purpose: the median split has to cope with ties.
    pts = [(rng.random(), rng.random()) for _ in range(n)]
    return pts + pts[:50]


def _build(points, node_size=16) -> PointIndex:
    return PointIndex(points, get_x=itemgetter(0), get_y=itemgetter(1), node_size=node_size)


def test_range_matches_brute_force():
    points = _random_points(1000, seed=7)
    index = _build(points)

    for min_x, min_y, max_x, max_y in [
        (0.2, 0.3, 0.45, 0.7),
        (0.0, 0.0, 1.0, 1.0),
        (0.9, 0.9, 0.95, 0.99),
        (0.5, 0.5, 0.5, 0.5),
    ]:
        expected = {
            i
            for i, (x, y) in enumerate(points)
            if min_x <= x <= max_x and min_y <= y <= max_y
        }
        got = index.range(min_x, min_y, max_x, max_y)
        assert len(got) == len(set(got))
        assert set(got) == expected


def test_within_matches_brute_force():
    points = _random_points(1000, seed=11)
    index = _build(points, node_size=8)

    for qx, qy, r in [(0.5, 0.5, 0.1), (0.05, 0.95, 0.2), (0.3, 0.3, 0.0), (0.5, 0.5, 2.0)]:
        expected = {
            i
            for i, (x, y) in enumerate(points)
            if (x - qx) ** 2 + (y - qy) ** 2 <= r * r
        }
        assert set(index.within(qx, qy, r)) == expected


def test_within_includes_exact_match_at_zero_radius():
    points = [(0.1, 0.1), (0.2, 0.2), (0.2, 0.2)]
    index = _build(points, node_size=1)
    assert sorted(index.within(0.2, 0.2, 0.0)) == [1, 2]


def test_points_keep_their_original_order():
    nodes = [ClusterNode.leaf(1.0 - i / 100, i / 100, i) for i in range(100)]
    index = PointIndex(nodes, node_size=4)

    assert index.points is nodes
    ids = index.range(0.0, 0.0, 1.0, 0.105)
    assert sorted(ids) == list(range(11))
    assert all(index.points[i].index == i for i in ids)


def test_empty_index_answers_nothing():
    index = PointIndex([])
    assert len(index) == 0
    assert index.range(0.0, 0.0, 1.0, 1.0) == []
    assert index.within(0.5, 0.5, 1.0) == []


def test_node_size_must_be_positive():
    with pytest.raises(ValueError):
        PointIndex([], node_size=0)
