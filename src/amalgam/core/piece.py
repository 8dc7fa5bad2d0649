"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from amalgam.core.enums import Player, PieceType

# Single-letter codes used in board diagrams (upper = circles, lower = squares).
_LETTERS: dict[PieceType, str] = {
    PieceType.RUBY: "R",
    PieceType.PEARL: "P",
    PieceType.AMBER: "A",
    PieceType.JADE: "J",
    PieceType.AMALGAM: "M",
    PieceType.VOID: "V",
    PieceType.PORTAL: "O",
}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable piece identity.  The registry owns its coordinate."""

    piece_id: str
    owner: Player
    piece_type: PieceType

    @property
    def is_gem(self) -> bool:
        return self.piece_type.is_gem

    @property
    def is_portal(self) -> bool:
        return self.piece_type == PieceType.PORTAL

    @property
    def is_void(self) -> bool:
        return self.piece_type == PieceType.VOID

    def is_enemy_of(self, other: Piece | Player) -> bool:
        owner = other.owner if isinstance(other, Piece) else other
        return self.owner != owner

    def __str__(self) -> str:
        letter = _LETTERS[self.piece_type]
        return letter if self.owner == Player.CIRCLES else letter.lower()
