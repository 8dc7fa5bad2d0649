"""BoardTopology - the static intersection table and the rail graph.

The board is a diamond of intersections centred on ``(0, 0)``.  Legal
intersections come from a curated per-column extent table mirrored into
the four quadrants, plus the two axes.  The rail network is a separate,
hand-drawn undirected graph over a subset of intersections.  It is not
derivable from geometry, so it is stored as data and checked once when
the topology is built.

    >>> topo = BoardTopology.standard()
    >>> topo.is_valid_intersection((0, 12))
    True
    >>> (6, 6) in topo.rail_neighbors((0, 0))
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from functools import cache

from amalgam.core.types import Coord, chebyshev, direction_between, neighbours

# ── Static board data ────────────────────────────────────────────────────────

BOARD_RADIUS = 12

# |x| -> largest |y| present in that column (off-axis columns only).
_COLUMN_EXTENTS: dict[int, int] = {
    1: 11,
    2: 11,
    3: 11,
    4: 11,
    5: 11,
    6: 10,
    7: 9,
    8: 9,
    9: 8,
    10: 6,
    11: 5,
}

# Long rail connections, listed once per undirected edge.
_RAIL_EDGES: tuple[tuple[Coord, Coord], ...] = (
    # Horizontal and vertical spines through the outer tips.
    ((-12, 0), (12, 0)),
    ((0, 12), (0, -12)),
    # Left tip.
    ((-12, 0), (-11, 5)),
    ((-12, 0), (-11, -5)),
    ((-12, 0), (-8, 3)),
    ((-12, 0), (-8, -3)),
    # Upper-left arc.
    ((-11, 5), (-9, 8)),
    ((-9, 8), (-8, 3)),
    ((-9, 8), (-6, 6)),
    ((-9, 8), (-8, 9)),
    ((-8, 9), (-5, 11)),
    ((-8, 9), (-6, 6)),
    ((-5, 11), (0, 12)),
    ((-5, 11), (0, 6)),
    # Upper-right arc.
    ((0, 12), (5, 11)),
    ((5, 11), (8, 9)),
    ((5, 11), (0, 6)),
    ((8, 9), (9, 8)),
    ((8, 9), (6, 6)),
    ((9, 8), (11, 5)),
    ((9, 8), (8, 3)),
    ((9, 8), (6, 6)),
    ((11, 5), (12, 0)),
    # Right tip.
    ((12, 0), (11, -5)),
    ((12, 0), (8, 3)),
    ((12, 0), (8, -3)),
    # Lower-right arc.
    ((11, -5), (9, -8)),
    ((9, -8), (8, -3)),
    ((9, -8), (6, -6)),
    ((9, -8), (8, -9)),
    ((8, -9), (5, -11)),
    ((8, -9), (6, -6)),
    ((5, -11), (0, -12)),
    ((5, -11), (0, -6)),
    # Lower-left arc.
    ((0, -12), (-5, -11)),
    ((-5, -11), (-8, -9)),
    ((-5, -11), (0, -6)),
    ((-8, -9), (-9, -8)),
    ((-8, -9), (-6, -6)),
    ((-9, -8), (-11, -5)),
    ((-9, -8), (-8, -3)),
    ((-9, -8), (-6, -6)),
    # Corners of the inner square.
    ((6, 6), (6, -6)),
    ((6, 6), (-6, 6)),
    ((6, -6), (-6, -6)),
    ((-6, -6), (-6, 6)),
    ((6, 6), (0, 0)),
    ((6, -6), (0, 0)),
    ((-6, -6), (0, 0)),
    ((-6, 6), (0, 0)),
    # Side midpoints.
    ((6, 0), (8, 3)),
    ((6, 0), (8, -3)),
    ((6, 0), (0, 6)),
    ((6, 0), (0, -6)),
    ((-6, 0), (-8, 3)),
    ((-6, 0), (-8, -3)),
    ((-6, 0), (0, 6)),
    ((-6, 0), (0, -6)),
    ((0, 0), (6, 0)),
    ((0, 0), (-6, 0)),
    ((0, 0), (0, 6)),
    ((0, 0), (0, -6)),
)


def _line(start: Coord, end: Coord) -> tuple[Coord, ...]:
    d = direction_between(start, end)
    assert d is not None, (start, end)
    span = chebyshev(start, end)
    return tuple((start[0] + d[0] * i, start[1] + d[1] * i) for i in range(span + 1))


# Ordered chains.  Only consecutive points along a chain are connected.
_RAIL_CHAINS: tuple[tuple[Coord, ...], ...] = (
    # Inner square perimeter.
    _line((-6, 6), (6, 6)),
    _line((6, 6), (6, -6)),
    _line((6, -6), (-6, -6)),
    _line((-6, -6), (-6, 6)),
    # Rotated square through the side midpoints.
    _line((0, 6), (6, 0)),
    _line((6, 0), (0, -6)),
    _line((0, -6), (-6, 0)),
    _line((-6, 0), (0, 6)),
    # Centre axes.
    _line((-12, 0), (12, 0)),
    _line((0, -12), (0, 12)),
    # Main diagonals.
    _line((-6, -6), (6, 6)),
    _line((-6, 6), (6, -6)),
    # Triangular extensions from the Amalgam starts.
    _line((0, 6), (5, 11)),
    _line((0, 6), (-5, 11)),
    _line((0, -6), (5, -11)),
    _line((0, -6), (-5, -11)),
)


# ── Consistency checks ───────────────────────────────────────────────────────


def validate_rail_graph(
    valid: frozenset[Coord],
    edges: Iterable[tuple[Coord, Coord]],
    chains: Iterable[Sequence[Coord]],
) -> None:
    """Raise ``ValueError`` if the curated rail data is inconsistent.

    Checks: every endpoint is a valid intersection, no self loops, no
    explicit edge listed twice, and every chain advances one unit step
    along a single compass direction.
    """
    seen: set[frozenset[Coord]] = set()
    for a, b in edges:
        for c in (a, b):
            if c not in valid:
                raise ValueError(f"Rail endpoint {c} is not a board intersection")
        if a == b:
            raise ValueError(f"Rail edge {a} loops onto itself")
        key = frozenset((a, b))
        if key in seen:
            raise ValueError(f"Duplicate rail edge {a} - {b}")
        seen.add(key)

    for chain in chains:
        if len(chain) < 2:
            raise ValueError(f"Rail chain {chain!r} has fewer than two points")
        heading = direction_between(chain[0], chain[1])
        for a, b in zip(chain, chain[1:]):
            for c in (a, b):
                if c not in valid:
                    raise ValueError(f"Rail chain point {c} is not a board intersection")
            if chebyshev(a, b) != 1 or direction_between(a, b) != heading:
                raise ValueError(f"Rail chain breaks between {a} and {b}")


def _build_intersections() -> frozenset[Coord]:
    points: set[Coord] = set()
    for v in range(-BOARD_RADIUS, BOARD_RADIUS + 1):
        points.add((v, 0))
        points.add((0, v))
    for ax, extent in _COLUMN_EXTENTS.items():
        for ay in range(1, extent + 1):
            for sx in (1, -1):
                for sy in (1, -1):
                    points.add((sx * ax, sy * ay))
    return frozenset(points)


# ── Topology ─────────────────────────────────────────────────────────────────


class BoardTopology:
    """Immutable lookup of intersections, adjacency and rail connectivity.

    Lookups never raise: unknown coordinates yield ``False`` or an empty
    set.
    """

    __slots__ = ("_intersections", "_adjacency", "_rail")

    def __init__(
        self,
        intersections: Iterable[Coord],
        rail_edges: Iterable[tuple[Coord, Coord]] = (),
        rail_chains: Iterable[Sequence[Coord]] = (),
    ) -> None:
        valid = frozenset(intersections)
        edges = tuple(rail_edges)
        chains = tuple(tuple(c) for c in rail_chains)
        validate_rail_graph(valid, edges, chains)

        self._intersections = valid
        self._adjacency: dict[Coord, frozenset[Coord]] = {
            c: frozenset(n for n in neighbours(c) if n in valid) for c in valid
        }

        rail: dict[Coord, set[Coord]] = {}

        def link(a: Coord, b: Coord) -> None:
            rail.setdefault(a, set()).add(b)
            rail.setdefault(b, set()).add(a)

        for a, b in edges:
            link(a, b)
        for chain in chains:
            for a, b in zip(chain, chain[1:]):
                link(a, b)
        self._rail: dict[Coord, frozenset[Coord]] = {
            c: frozenset(ns) for c, ns in rail.items()
        }

    @classmethod
    def standard(cls) -> BoardTopology:
        """The shared default Amalgam board."""
        return _standard_topology()

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def intersections(self) -> frozenset[Coord]:
        return self._intersections

    def is_valid_intersection(self, coord: Coord) -> bool:
        return coord in self._intersections

    def adjacent_intersections(self, coord: Coord) -> frozenset[Coord]:
        return self._adjacency.get(coord, frozenset())

    def is_rail_node(self, coord: Coord) -> bool:
        return coord in self._rail

    def rail_neighbors(self, coord: Coord) -> frozenset[Coord]:
        return self._rail.get(coord, frozenset())

    @property
    def rail_nodes(self) -> frozenset[Coord]:
        return frozenset(self._rail)

    def rail_edges(self) -> frozenset[frozenset[Coord]]:
        return frozenset(
            frozenset((a, b)) for a, ns in self._rail.items() for b in ns
        )

    def __len__(self) -> int:
        return len(self._intersections)

    def __contains__(self, coord: object) -> bool:
        return coord in self._intersections

    def __repr__(self) -> str:
        return (
            f"BoardTopology({len(self._intersections)} intersections, "
            f"{len(self._rail)} rail nodes)"
        )


@cache
def _standard_topology() -> BoardTopology:
    return BoardTopology(_build_intersections(), _RAIL_EDGES, _RAIL_CHAINS)
