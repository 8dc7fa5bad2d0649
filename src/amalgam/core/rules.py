"""WinEvaluator - decides whether the turn that just ended won the game."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass

from amalgam.core.enums import Player, PieceType, VictoryType
from amalgam.core.policies import EliminationPolicy
from amalgam.core.registry import PieceRegistry, special_start
from amalgam.core.types import Coord


def default_objectives() -> dict[Player, Coord]:
    """Each side aims for the home intersection of the enemy Void."""
    return {p: special_start(p.opposite, PieceType.VOID) for p in Player}


@dataclass(frozen=True, slots=True)
class WinResult:
    winner: Player
    victory_type: VictoryType


class WinEvaluator:
    """Checks Objective first, then Elimination.  Never reports a draw."""

    __slots__ = ("_objectives", "_elimination")

    def __init__(
        self,
        objectives: Mapping[Player, Coord] | None = None,
        elimination: EliminationPolicy = EliminationPolicy.ALL_PIECES,
    ) -> None:
        self._objectives = dict(objectives or default_objectives())
        self._elimination = elimination

    def objective_for(self, player: Player) -> Coord:
        return self._objectives[player]

    def evaluate(
        self,
        registry: PieceRegistry,
        mover: Player,
        moved: Collection[Coord],
    ) -> WinResult | None:
        target = self._objectives[mover]
        if target in moved:
            piece = registry.occupant_at(target)
            if piece is not None and piece.owner == mover:
                return WinResult(mover, VictoryType.OBJECTIVE)

        if self._elimination.is_eliminated(registry, mover.opposite):
            return WinResult(mover, VictoryType.ELIMINATION)
        return None
