"""Coordinate type and planar geometry helpers.

Intersections are addressed by integer ``(x, y)`` pairs centred on the
middle of the board.  Every helper here is pure geometry: whether a
coordinate actually exists on the board is the topology's business.
"""

from __future__ import annotations

Coord = tuple[int, int]
Direction = tuple[int, int]

# Eight compass steps, clockwise from north.
DIRECTIONS: tuple[Direction, ...] = (
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
)


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def step(coord: Coord, direction: Direction, distance: int = 1) -> Coord:
    return (coord[0] + direction[0] * distance, coord[1] + direction[1] * distance)


def neighbours(coord: Coord) -> list[Coord]:
    """The eight surrounding points, valid or not."""
    return [step(coord, d) for d in DIRECTIONS]


def chebyshev(a: Coord, b: Coord) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def is_adjacent(a: Coord, b: Coord) -> bool:
    return chebyshev(a, b) == 1


def direction_between(a: Coord, b: Coord) -> Direction | None:
    """Unit step leading from *a* to *b* along a rank, file or diagonal.

    Returns ``None`` if the two points are equal or not aligned on one of
    the eight compass lines.
    """
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    if dx == 0 and dy == 0:
        return None
    if dx != 0 and dy != 0 and abs(dx) != abs(dy):
        return None
    return (_sign(dx), _sign(dy))


def points_between(a: Coord, b: Coord) -> list[Coord]:
    """Points strictly between *a* and *b*; empty if not collinear."""
    d = direction_between(a, b)
    if d is None:
        return []
    span = chebyshev(a, b)
    return [step(a, d, i) for i in range(1, span)]


def coord_name(coord: Coord) -> str:
    """Human-readable name, e.g. ``(3,-4)``."""
    return f"({coord[0]},{coord[1]})"

