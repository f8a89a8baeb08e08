from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TileWindow:
    """
    A query rectangle in the unit plane plus the tile x used as the pixel origin
    for features found in it.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float
    origin_x: int


def tile_query_windows(z: int, x: int, y: int, padding: float) -> list[TileWindow]:
    """
    Padded query rectangles for tile z/x/y.

    `padding` is in tile units (radius / extent). Tiles on the left or right edge of
    the world also get a window on the opposite edge, shifted so its features render
    just outside this tile.
    """
    z2 = 2 ** int(z)
    top = (y - padding) / z2
    bottom = (y + 1 + padding) / z2

    out = [TileWindow((x - padding) / z2, top, (x + 1 + padding) / z2, bottom, x)]
    if x == 0:
        out.append(TileWindow(1 - padding / z2, top, 1.0, bottom, z2))
    if x == z2 - 1:
        out.append(TileWindow(0.0, top, padding / z2, bottom, -1))
    return out


def to_tile_pixel(px: float, py: float, *, z2: int, x: int, y: int, extent: int) -> tuple[int, int]:
    """
    Unit-plane point -> integer pixel coordinates local to tile (x, y).
    """
    return (
        round_half_away(extent * (px * z2 - x)),
        round_half_away(extent * (py * z2 - y)),
    )


def round_half_away(v: float) -> int:
    """
    Round to the nearest int, halves away from zero (-2.5 -> -3).
    """
    return int(math.copysign(math.floor(abs(v) + 0.5), v))
