"""Game session state, action history and read-only snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from amalgam.core.abilities import PendingAbility
from amalgam.core.enums import AbilityKind, Player, PieceType
from amalgam.core.piece import Piece
from amalgam.core.placement import Allotments
from amalgam.core.registry import PieceRegistry
from amalgam.core.rules import WinResult
from amalgam.core.types import Coord
from amalgam.game.interfaces import GamePhase, LaunchStage, TurnStep


@dataclass(frozen=True, slots=True)
class ActionRecord:
    """A single committed action in the game history."""

    turn: int
    player: Player
    action: str
    source: Coord | None = None
    target: Coord | None = None
    piece_type: PieceType | None = None
    ability: AbilityKind | None = None
    destroyed: tuple[Coord, ...] = ()


@dataclass
class GameSession:
    """Everything that changes during a game, in one explicit value.

    The controller is the only writer.  This is a pure data class with a
    few bookkeeping helpers; rule checks live in the core layer.
    """

    registry: PieceRegistry
    phase: GamePhase = GamePhase.SETUP
    placement_index: int = 1
    placer: Player = Player.SQUARES
    allotments: Allotments = field(default_factory=dict)
    current_player: Player = Player.SQUARES
    turn: int = 0
    step: TurnStep = TurnStep.AWAITING_ACTION
    pending: dict[AbilityKind, PendingAbility] = field(default_factory=dict)
    launch_stage: LaunchStage = LaunchStage.NONE
    launch_source: Coord | None = None
    launch_choices: dict[Coord, frozenset[Coord]] = field(default_factory=dict)
    launch_is_primary: bool = False
    selected: Coord | None = None
    moved: list[Coord] = field(default_factory=list)
    turn_snapshot: dict[Coord, Piece] = field(default_factory=dict)
    history: list[ActionRecord] = field(default_factory=list)
    result: WinResult | None = None

    # ── Turn bookkeeping ─────────────────────────────────────────────────

    @property
    def acting_player(self) -> Player:
        if self.phase == GamePhase.SETUP:
            return self.placer
        return self.current_player

    def clear_launch(self) -> None:
        self.launch_stage = LaunchStage.NONE
        self.launch_source = None
        self.launch_choices = {}
        self.launch_is_primary = False

    def clear_turn_ephemera(self) -> None:
        self.step = TurnStep.AWAITING_ACTION
        self.pending = {}
        self.selected = None
        self.moved = []
        self.clear_launch()

    def begin_turn(self, player: Player) -> None:
        self.current_player = player
        self.turn += 1
        self.clear_turn_ephemera()
        self.turn_snapshot = self.registry.snapshot()

    def rollback(self) -> int:
        """Return to the start of the active turn.  Drops this turn's history."""
        self.registry.restore(self.turn_snapshot)
        self.clear_turn_ephemera()
        kept = [r for r in self.history if r.turn != self.turn]
        dropped = len(self.history) - len(kept)
        self.history = kept
        return dropped

    def to_snapshot(self) -> GameStateSnapshot:
        return GameStateSnapshot(
            phase=self.phase,
            active_player=self.acting_player,
            placement_index=self.placement_index,
            allotments={p: dict(a) for p, a in self.allotments.items()},
            turn=self.turn,
            step=self.step,
            pending=tuple(self.pending),
            launch_stage=self.launch_stage,
            selected=self.selected,
            pieces=self.registry.snapshot(),
            result=self.result,
        )


@dataclass(frozen=True, slots=True)
class GameStateSnapshot:
    """Immutable copy of the session for rendering and persistence."""

    phase: GamePhase
    active_player: Player
    placement_index: int
    allotments: dict[Player, dict[PieceType, int]]
    turn: int
    step: TurnStep
    pending: tuple[AbilityKind, ...]
    launch_stage: LaunchStage
    selected: Coord | None
    pieces: dict[Coord, Piece]
    result: WinResult | None = None

    @property
    def winner(self) -> Player | None:
        return self.result.winner if self.result else None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "phase": self.phase.name.lower(),
            "active_player": str(self.active_player),
            "placement_index": self.placement_index,
            "allotments": {
                str(p): {t.name.lower(): n for t, n in a.items()}
                for p, a in self.allotments.items()
            },
            "turn": self.turn,
            "step": int(self.step),
            "pending": [str(k) for k in self.pending],
            "launch_stage": self.launch_stage.name.lower(),
            "selected": list(self.selected) if self.selected else None,
            "pieces": [
                {
                    "id": piece.piece_id,
                    "owner": str(piece.owner),
                    "type": piece.piece_type.name.lower(),
                    "coord": [x, y],
                }
                for (x, y), piece in sorted(self.pieces.items())
            ],
            "winner": str(self.winner) if self.winner is not None else None,
            "victory_type": self.result.victory_type.name.lower() if self.result else None,
        }
