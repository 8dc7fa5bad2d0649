"""Core enumerations for the Amalgam domain."""

from __future__ import annotations

from enum import IntEnum


class Player(IntEnum):
    """Side of the board."""

    CIRCLES = 0
    SQUARES = 1

    @property
    def opposite(self) -> Player:
        return Player(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


class PieceType(IntEnum):
    """Piece kinds. Gems first, then wildcards, then the Portal."""

    RUBY = 1
    PEARL = 2
    AMBER = 3
    JADE = 4
    AMALGAM = 5
    VOID = 6
    PORTAL = 7

    @property
    def is_gem(self) -> bool:
        return self in _GEMS

    @property
    def is_wildcard(self) -> bool:
        return self in (PieceType.AMALGAM, PieceType.VOID)


class AbilityKind(IntEnum):
    """Paired special abilities, one per gem type."""

    FIREBALL = 1
    TIDALWAVE = 2
    SAP = 3
    LAUNCH = 4

    @property
    def gem(self) -> PieceType:
        return _ABILITY_GEM[self]

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


class VictoryType(IntEnum):
    """How a game was won."""

    OBJECTIVE = 1
    ELIMINATION = 2


GEM_TYPES: tuple[PieceType, ...] = (
    PieceType.RUBY,
    PieceType.PEARL,
    PieceType.AMBER,
    PieceType.JADE,
)
_GEMS = frozenset(GEM_TYPES)

_GEM_ABILITY: dict[PieceType, AbilityKind] = {
    PieceType.RUBY: AbilityKind.FIREBALL,
    PieceType.PEARL: AbilityKind.TIDALWAVE,
    PieceType.AMBER: AbilityKind.SAP,
    PieceType.JADE: AbilityKind.LAUNCH,
}
_ABILITY_GEM: dict[AbilityKind, PieceType] = {v: k for k, v in _GEM_ABILITY.items()}
