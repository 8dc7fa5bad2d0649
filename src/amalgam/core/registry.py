"""PieceRegistry - the single source of truth for piece positions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from amalgam.core.enums import Player, PieceType
from amalgam.core.errors import EmptySource, InvalidCoordinate, OccupiedDestination
from amalgam.core.piece import Piece
from amalgam.core.topology import BOARD_RADIUS, BoardTopology
from amalgam.core.types import Coord, coord_name

# Pieces present before setup begins.
_SPECIAL_LAYOUT: dict[Player, tuple[tuple[PieceType, str, Coord], ...]] = {
    Player.CIRCLES: (
        (PieceType.VOID, "void", (0, 12)),
        (PieceType.AMALGAM, "amalgam", (0, 6)),
        (PieceType.PORTAL, "portal1", (6, 6)),
        (PieceType.PORTAL, "portal2", (-6, 6)),
    ),
    Player.SQUARES: (
        (PieceType.VOID, "void", (0, -12)),
        (PieceType.AMALGAM, "amalgam", (0, -6)),
        (PieceType.PORTAL, "portal1", (6, -6)),
        (PieceType.PORTAL, "portal2", (-6, -6)),
    ),
}


def special_start(owner: Player, piece_type: PieceType) -> Coord:
    """Start coordinate of *owner*'s first piece of *piece_type*."""
    for ptype, _, coord in _SPECIAL_LAYOUT[owner]:
        if ptype == piece_type:
            return coord
    raise KeyError(f"{owner} has no pre-placed {piece_type.name}")


def special_coords() -> frozenset[Coord]:
    return frozenset(c for layout in _SPECIAL_LAYOUT.values() for _, _, c in layout)


class PieceRegistry:
    """Mutable map of intersection -> piece.

    At most one piece per intersection.  Every mutation checks the
    topology first and raises a :class:`RuleViolation` subclass without
    touching state on failure.
    """

    __slots__ = ("_topology", "_pieces")

    def __init__(self, topology: BoardTopology | None = None) -> None:
        self._topology = topology or BoardTopology.standard()
        self._pieces: dict[Coord, Piece] = {}

    @classmethod
    def initial(cls, topology: BoardTopology | None = None) -> PieceRegistry:
        """Registry holding the eight pre-placed special pieces."""
        registry = cls(topology)
        for owner, layout in _SPECIAL_LAYOUT.items():
            for ptype, suffix, coord in layout:
                registry.place(Piece(f"{owner}_{suffix}", owner, ptype), coord)
        return registry

    @property
    def topology(self) -> BoardTopology:
        return self._topology

    # ── Element access ───────────────────────────────────────────────────

    def __getitem__(self, coord: Coord) -> Piece | None:
        return self._pieces.get(coord)

    def occupant_at(self, coord: Coord) -> Piece | None:
        return self._pieces.get(coord)

    def is_empty(self, coord: Coord) -> bool:
        return coord not in self._pieces

    def __contains__(self, coord: object) -> bool:
        return coord in self._pieces

    def __iter__(self) -> Iterator[tuple[Coord, Piece]]:
        return iter(list(self._pieces.items()))

    def __len__(self) -> int:
        return len(self._pieces)

    def locate(self, piece_id: str) -> Coord | None:
        for coord, piece in self._pieces.items():
            if piece.piece_id == piece_id:
                return coord
        return None

    def pieces_of(
        self,
        owner: Player | None = None,
        piece_type: PieceType | None = None,
    ) -> dict[Coord, Piece]:
        """All pieces matching the optional owner and type filters."""
        return {
            coord: piece
            for coord, piece in self._pieces.items()
            if (owner is None or piece.owner == owner)
            and (piece_type is None or piece.piece_type == piece_type)
        }

    # ── Mutation ─────────────────────────────────────────────────────────

    def _require_valid(self, coord: Coord) -> None:
        if not self._topology.is_valid_intersection(coord):
            raise InvalidCoordinate(f"{coord_name(coord)} is not on the board")

    def _require_occupied(self, coord: Coord) -> Piece:
        self._require_valid(coord)
        piece = self._pieces.get(coord)
        if piece is None:
            raise EmptySource(f"No piece at {coord_name(coord)}")
        return piece

    def place(self, piece: Piece, coord: Coord) -> None:
        self._require_valid(coord)
        if coord in self._pieces:
            raise OccupiedDestination(f"{coord_name(coord)} is occupied")
        self._pieces[coord] = piece

    def relocate(self, coord: Coord, new_coord: Coord) -> Piece:
        piece = self._require_occupied(coord)
        self._require_valid(new_coord)
        if new_coord in self._pieces:
            raise OccupiedDestination(f"{coord_name(new_coord)} is occupied")
        del self._pieces[coord]
        self._pieces[new_coord] = piece
        return piece

    def remove(self, coord: Coord) -> Piece:
        piece = self._require_occupied(coord)
        del self._pieces[coord]
        return piece

    def swap(self, a: Coord, b: Coord) -> None:
        pa = self._require_occupied(a)
        pb = self._require_occupied(b)
        self._pieces[a] = pb
        self._pieces[b] = pa

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> dict[Coord, Piece]:
        return dict(self._pieces)

    def restore(self, snapshot: Mapping[Coord, Piece]) -> None:
        self._pieces = dict(snapshot)

    def copy(self) -> PieceRegistry:
        clone = PieceRegistry(self._topology)
        clone._pieces = dict(self._pieces)
        return clone

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PieceRegistry):
            return NotImplemented
        return self._pieces == other._pieces

    def __repr__(self) -> str:
        rows: list[str] = []
        for y in range(BOARD_RADIUS, -BOARD_RADIUS - 1, -1):
            cells: list[str] = []
            for x in range(-BOARD_RADIUS, BOARD_RADIUS + 1):
                coord = (x, y)
                if not self._topology.is_valid_intersection(coord):
                    cells.append(" ")
                    continue
                piece = self._pieces.get(coord)
                cells.append(str(piece) if piece else ".")
            rows.append(f"{y:>3} " + " ".join(cells).rstrip())
        return "\n".join(rows)
