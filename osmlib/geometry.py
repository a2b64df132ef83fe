"""
Shapely geometry builders for OSM objects

Coordinates are (lon, lat) pairs in decimal degrees, no reprojection.
"""

from typing import Iterable, List, Sequence, Tuple

from shapely.geometry import LineString, Point, Polygon

from .errors import GeometryError

Coordinate = Tuple[float, float]


def point(lon: float, lat: float) -> Point:
    """Create a Point from one coordinate pair"""
    return Point(lon, lat)


def linestring(coords: Sequence[Coordinate]) -> LineString:
    """Create a LineString, needs at least two coordinates"""
    if len(coords) < 2:
        raise GeometryError("a linestring needs at least two coordinates")
    return LineString(coords)


def polygon(shell: Sequence[Coordinate], holes: Iterable[Sequence[Coordinate]] = ()) -> Polygon:
    """
    Create a Polygon from a closed ring and optional inner rings.

    Args:
        shell: Outer ring, first coordinate equal to the last
        holes: Inner rings, same rules as the shell

    Returns:
        shapely Polygon
    """
    rings: List[Sequence[Coordinate]] = [shell, *holes]
    for ring in rings:
        if len(ring) < 4:
            raise GeometryError("a polygon ring needs at least three distinct coordinates")
        if tuple(ring[0]) != tuple(ring[-1]):
            raise GeometryError("a polygon ring must be closed")
    return Polygon(shell, [list(hole) for hole in rings[1:]])
