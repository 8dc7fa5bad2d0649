"""Intents - the only way callers change game state.

Each intent may name the ``player`` issuing it.  When given, it must match
the side to act or the intent is rejected with ``NotYourTurn``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from amalgam.core.enums import AbilityKind, Player, PieceType
from amalgam.core.types import Coord


@dataclass(frozen=True, slots=True)
class PlacementIntent:
    """Place a gem during setup."""

    piece_type: PieceType
    coord: Coord
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class AutoSetupIntent:
    """Fill the default arrangement for both sides at once."""

    player: Player | None = None


@dataclass(frozen=True, slots=True)
class SelectIntent:
    coord: Coord
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class DeselectIntent:
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class MoveIntent:
    """Move the selected piece (or *source*, when given) to *coord*."""

    coord: Coord
    source: Coord | None = None
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class SwapIntent:
    """Swap the selected Portal (or *source*) with the piece on *coord*."""

    coord: Coord
    source: Coord | None = None
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class LaunchSelectIntent:
    piece_coord: Coord
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class LaunchDestinationIntent:
    coord: Coord
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class AbilityConfirmIntent:
    """Confirm a pending ability.  Empty *chosen_targets* means all of them."""

    kind: AbilityKind
    chosen_targets: tuple[Coord, ...] = field(default=())
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class AbilityCancelIntent:
    player: Player | None = None


@dataclass(frozen=True, slots=True)
class EndTurnIntent:
    """Finish the turn without using the pending abilities."""

    player: Player | None = None


@dataclass(frozen=True, slots=True)
class ResetTurnIntent:
    player: Player | None = None


Intent = (
    PlacementIntent
    | AutoSetupIntent
    | SelectIntent
    | DeselectIntent
    | MoveIntent
    | SwapIntent
    | LaunchSelectIntent
    | LaunchDestinationIntent
    | AbilityConfirmIntent
    | AbilityCancelIntent
    | EndTurnIntent
    | ResetTurnIntent
)
