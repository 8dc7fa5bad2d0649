"""Movement legality for ordinary moves and Portal swaps.

Non-Portal pieces step to an empty adjacent intersection.  Portals
additionally step onto any adjacent rail node and jump along rail edges
regardless of distance.
"""

from __future__ import annotations

from amalgam.core.enums import Player
from amalgam.core.errors import (
    EmptySource,
    IllegalMoveShape,
    InvalidCoordinate,
    OccupiedDestination,
)
from amalgam.core.piece import Piece
from amalgam.core.registry import PieceRegistry
from amalgam.core.types import Coord, coord_name


class MoveValidator:
    """Stateless queries over a registry and its topology."""

    __slots__ = ("_registry", "_topology")

    def __init__(self, registry: PieceRegistry) -> None:
        self._registry = registry
        self._topology = registry.topology

    # ── Shapes ───────────────────────────────────────────────────────────

    def reachable(self, piece: Piece, src: Coord) -> frozenset[Coord]:
        """Destinations *piece* could reach from *src*, ignoring occupancy."""
        topo = self._topology
        adjacent = topo.adjacent_intersections(src)
        if not piece.is_portal:
            return adjacent
        stepped = {c for c in adjacent if topo.is_rail_node(c)}
        return frozenset(stepped | topo.rail_neighbors(src))

    def is_move_shape(self, piece: Piece, src: Coord, dst: Coord) -> bool:
        return dst in self.reachable(piece, src)

    # ── Moves ────────────────────────────────────────────────────────────

    def legal_destinations(self, coord: Coord) -> frozenset[Coord]:
        """Empty intersections the occupant of *coord* may move to.

        Empty or invalid source yields an empty set.
        """
        piece = self._registry.occupant_at(coord)
        if piece is None:
            return frozenset()
        return frozenset(
            c for c in self.reachable(piece, coord) if self._registry.is_empty(c)
        )

    def legal_moves_for(self, player: Player) -> dict[Coord, frozenset[Coord]]:
        """Every movable piece of *player* mapped to its destinations."""
        moves: dict[Coord, frozenset[Coord]] = {}
        for coord in self._registry.pieces_of(player):
            dests = self.legal_destinations(coord)
            if dests:
                moves[coord] = dests
        return moves

    def validate_move(self, src: Coord, dst: Coord) -> Piece:
        """Raise a rule violation unless *src* -> *dst* is legal."""
        piece = self._source(src)
        if not self._topology.is_valid_intersection(dst):
            raise InvalidCoordinate(f"{coord_name(dst)} is not on the board")
        if not self._registry.is_empty(dst):
            raise OccupiedDestination(f"{coord_name(dst)} is occupied")
        if not self.is_move_shape(piece, src, dst):
            raise IllegalMoveShape(
                f"{coord_name(src)} -> {coord_name(dst)} is neither adjacent "
                "nor a rail traversal"
            )
        return piece

    # ── Swaps ────────────────────────────────────────────────────────────

    def legal_swaps(self, coord: Coord) -> frozenset[Coord]:
        """Occupied intersections a Portal on *coord* may trade places with."""
        piece = self._registry.occupant_at(coord)
        if piece is None or not piece.is_portal:
            return frozenset()
        return frozenset(
            c
            for c in self.reachable(piece, coord)
            if not self._registry.is_empty(c)
            and self.is_move_shape(piece, c, coord)
        )

    def validate_swap(self, portal: Coord, other: Coord) -> tuple[Piece, Piece]:
        piece = self._source(portal)
        if not piece.is_portal:
            raise IllegalMoveShape(f"Only a Portal may swap, not {piece.piece_type.name}")
        partner = self._source(other)
        if portal == other or not (
            self.is_move_shape(piece, portal, other)
            and self.is_move_shape(piece, other, portal)
        ):
            raise IllegalMoveShape(
                f"{coord_name(portal)} cannot swap with {coord_name(other)}"
            )
        return piece, partner

    # ── Internal helpers ─────────────────────────────────────────────────

    def _source(self, coord: Coord) -> Piece:
        if not self._topology.is_valid_intersection(coord):
            raise InvalidCoordinate(f"{coord_name(coord)} is not on the board")
        piece = self._registry.occupant_at(coord)
        if piece is None:
            raise EmptySource(f"No piece at {coord_name(coord)}")
        return piece
