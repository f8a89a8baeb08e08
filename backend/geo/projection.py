from __future__ import annotations

import math


def lng_x(lng: float) -> float:
    """
    Longitude (degrees) -> x in the unit plane [0, 1].
    """
    return lng / 360.0 + 0.5


def lat_y(lat: float) -> float:
    """
    Latitude (degrees) -> y in the unit plane [0, 1] (spherical Mercator, y grows southwards).

    Clamped so the poles (and anything past them) land on the plane edges.
    """
    sin = math.sin(lat * math.pi / 180.0)
    if sin >= 1.0:
        return 0.0
    if sin <= -1.0:
        return 1.0
    y = 0.5 - 0.25 * math.log((1.0 + sin) / (1.0 - sin)) / math.pi
    return max(0.0, min(1.0, y))


def x_lng(x: float) -> float:
    return (x - 0.5) * 360.0


def y_lat(y: float) -> float:
    y2 = (180.0 - y * 360.0) * math.pi / 180.0
    return 360.0 * math.atan(math.exp(y2)) / math.pi - 90.0
