from __future__ import annotations

import math
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Callable, Sequence


@dataclass
class PointIndex:
    """
    Static, bulk-loaded 2D point index (a flat KD-tree).

    Notes:
    - `points` is kept in its original order; queries return positions into it.
    - Construction sorts an id permutation + interleaved coords so that every subtree
      is a contiguous slice, splitting on x at even depths and on y at odd depths.
    - Slices of `node_size` items or fewer are left unsorted and scanned linearly.
    """

    points: Sequence[Any]
    get_x: Callable[[Any], float] = field(default=attrgetter("x"), repr=False)
    get_y: Callable[[Any], float] = field(default=attrgetter("y"), repr=False)
    node_size: int = 64

    ids: list[int] = field(init=False, repr=False)
    coords: list[float] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.node_size < 1:
            raise ValueError(f"node_size must be >= 1, got {self.node_size}")
        n = len(self.points)
        self.ids = list(range(n))
        coords: list[float] = [0.0] * (2 * n)
        for i, p in enumerate(self.points):
            coords[2 * i] = float(self.get_x(p))
            coords[2 * i + 1] = float(self.get_y(p))
        self.coords = coords
        _sort(self.ids, self.coords, self.node_size, 0, n - 1, 0)

    def __len__(self) -> int:
        return len(self.points)

    def range(self, min_x: float, min_y: float, max_x: float, max_y: float) -> list[int]:
        """
        Positions of points inside the closed rectangle [min_x, max_x] x [min_y, max_y].
        """
        ids = self.ids
        coords = self.coords
        node_size = self.node_size
        stack = [(0, len(ids) - 1, 0)]
        out: list[int] = []

        while stack:
            left, right, axis = stack.pop()

            if right - left <= node_size:
                for i in range(left, right + 1):
                    x = coords[2 * i]
                    y = coords[2 * i + 1]
                    if min_x <= x <= max_x and min_y <= y <= max_y:
                        out.append(ids[i])
                continue

            m = (left + right) >> 1
            x = coords[2 * m]
            y = coords[2 * m + 1]
            if min_x <= x <= max_x and min_y <= y <= max_y:
                out.append(ids[m])

            next_axis = (axis + 1) % 2
            if (min_x <= x) if axis == 0 else (min_y <= y):
                stack.append((left, m - 1, next_axis))
            if (max_x >= x) if axis == 0 else (max_y >= y):
                stack.append((m + 1, right, next_axis))

        return out

    def within(self, qx: float, qy: float, r: float) -> list[int]:
        """
        Positions of points within Euclidean distance `r` of (qx, qy), boundary included.
        """
        ids = self.ids
        coords = self.coords
        node_size = self.node_size
        r2 = r * r
        stack = [(0, len(ids) - 1, 0)]
        out: list[int] = []

        while stack:
            left, right, axis = stack.pop()

            if right - left <= node_size:
                for i in range(left, right + 1):
                    if _sq_dist(coords[2 * i], coords[2 * i + 1], qx, qy) <= r2:
                        out.append(ids[i])
                continue

            m = (left + right) >> 1
            x = coords[2 * m]
            y = coords[2 * m + 1]
            if _sq_dist(x, y, qx, qy) <= r2:
                out.append(ids[m])

            next_axis = (axis + 1) % 2
            if (qx - r <= x) if axis == 0 else (qy - r <= y):
                stack.append((left, m - 1, next_axis))
            if (qx + r >= x) if axis == 0 else (qy + r >= y):
                stack.append((m + 1, right, next_axis))

        return out


def _sq_dist(ax: float, ay: float, bx: float, by: float) -> float:
    dx = ax - bx
    dy = ay - by
    return dx * dx + dy * dy


def _sort(
    ids: list[int], coords: list[float], node_size: int, left: int, right: int, depth: int
) -> None:
    if right - left <= node_size:
        return

    m = (left + right) >> 1
    _select(ids, coords, m, left, right, depth % 2)

    _sort(ids, coords, node_size, left, m - 1, depth + 1)
    _sort(ids, coords, node_size, m + 1, right, depth + 1)


def _select(
    ids: list[int], coords: list[float], k: int, left: int, right: int, inc: int
) -> None:
    # Floyd-Rivest selection: afterwards coords[2*k+inc] is the k-th smallest on that axis,
    # with smaller-or-equal values on the left and greater-or-equal on the right.
    while right > left:
        if right - left > 600:
            n = right - left + 1
            m = k - left + 1
            z = math.log(n)
            s = 0.5 * math.exp(2.0 * z / 3.0)
            sd = 0.5 * math.sqrt(z * s * (n - s) / n) * (-1 if m - n / 2 < 0 else 1)
            new_left = max(left, int(math.floor(k - m * s / n + sd)))
            new_right = min(right, int(math.floor(k + (n - m) * s / n + sd)))
            _select(ids, coords, k, new_left, new_right, inc)

        t = coords[2 * k + inc]
        i = left
        j = right

        _swap_item(ids, coords, left, k)
        if coords[2 * right + inc] > t:
            _swap_item(ids, coords, left, right)

        while i < j:
            _swap_item(ids, coords, i, j)
            i += 1
            j -= 1
            while coords[2 * i + inc] < t:
                i += 1
            while coords[2 * j + inc] > t:
                j -= 1

        if coords[2 * left + inc] == t:
            _swap_item(ids, coords, left, j)
        else:
            j += 1
            _swap_item(ids, coords, j, right)

        if j <= k:
            left = j + 1
        if k <= j:
            right = j - 1


def _swap_item(ids: list[int], coords: list[float], i: int, j: int) -> None:
    ids[i], ids[j] = ids[j], ids[i]
    coords[2 * i], coords[2 * j] = coords[2 * j], coords[2 * i]
    coords[2 * i + 1], coords[2 * j + 1] = coords[2 * j + 1], coords[2 * i + 1]
