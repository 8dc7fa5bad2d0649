"""Setup-phase placement: zones, allotments and the default arrangement."""

from __future__ import annotations

from functools import cache

from amalgam.core.enums import GEM_TYPES, Player, PieceType
from amalgam.core.errors import (
    AllotmentExceeded,
    InvalidCoordinate,
    OccupiedDestination,
    OutsidePlacementZone,
)
from amalgam.core.registry import PieceRegistry, special_coords, special_start
from amalgam.core.topology import BoardTopology
from amalgam.core.types import Coord, chebyshev, coord_name

GEM_ALLOTMENT = 2
ZONE_RADIUS = 3

Allotments = dict[Player, dict[PieceType, int]]

# Gems placed by the auto-setup shortcut, circles side.  Squares mirror it.
_CIRCLES_ARRANGEMENT: tuple[tuple[PieceType, Coord], ...] = (
    (PieceType.RUBY, (-1, 5)),
    (PieceType.RUBY, (1, 5)),
    (PieceType.PEARL, (-2, 6)),
    (PieceType.PEARL, (2, 6)),
    (PieceType.AMBER, (-1, 7)),
    (PieceType.AMBER, (1, 7)),
    (PieceType.JADE, (-2, 8)),
    (PieceType.JADE, (2, 8)),
)

DEFAULT_ARRANGEMENT: dict[Player, tuple[tuple[PieceType, Coord], ...]] = {
    Player.CIRCLES: _CIRCLES_ARRANGEMENT,
    Player.SQUARES: tuple((pt, (x, -y)) for pt, (x, y) in _CIRCLES_ARRANGEMENT),
}


def initial_allotments(per_type: int = GEM_ALLOTMENT) -> Allotments:
    return {player: {gem: per_type for gem in GEM_TYPES} for player in Player}


@cache
def _zone(player: Player, topology: BoardTopology) -> frozenset[Coord]:
    centre = special_start(player, PieceType.AMALGAM)
    reserved = special_coords()
    return frozenset(
        c
        for c in topology.intersections
        if chebyshev(c, centre) <= ZONE_RADIUS and c not in reserved
    )


def placement_zone(player: Player, topology: BoardTopology | None = None) -> frozenset[Coord]:
    """Intersections around *player*'s Amalgam where gems may be placed."""
    return _zone(player, topology or BoardTopology.standard())


def validate_placement(
    registry: PieceRegistry,
    allotments: Allotments,
    player: Player,
    piece_type: PieceType,
    coord: Coord,
) -> None:
    """Raise the matching rule violation if the placement is illegal."""
    if not registry.topology.is_valid_intersection(coord):
        raise InvalidCoordinate(f"{coord_name(coord)} is not on the board")
    if allotments[player].get(piece_type, 0) <= 0:
        raise AllotmentExceeded(f"{player} has no {piece_type.name} left to place")
    if coord not in placement_zone(player, registry.topology):
        raise OutsidePlacementZone(f"{coord_name(coord)} is outside the {player} zone")
    if not registry.is_empty(coord):
        raise OccupiedDestination(f"{coord_name(coord)} is occupied")
