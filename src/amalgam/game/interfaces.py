"""Abstract interfaces and state-machine enums for the game layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from amalgam.core.types import Coord
    from amalgam.game.controller import ActionOutcome
    from amalgam.game.intents import Intent
    from amalgam.game.state import GameStateSnapshot


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Top-level phases of an Amalgam game."""

    SETUP = auto()
    GAMEPLAY = auto()
    GAME_OVER = auto()


class TurnStep(IntEnum):
    """Step within a gameplay turn.  Only ever increases inside a turn."""

    AWAITING_ACTION = 1
    AWAITING_ABILITY = 2


class LaunchStage(IntEnum):
    """Sub-state of the two-click Launch interaction."""

    NONE = 0
    AWAITING_LAUNCH_SOURCE = auto()
    AWAITING_LAUNCH_DESTINATION = auto()


# ── Controller interface ─────────────────────────────────────────────────────


class ITurnController(ABC):
    """Contract between the rules engine and whatever drives it."""

    @abstractmethod
    def new_game(self) -> None:
        """Discard the current game and start a fresh setup phase."""

    @abstractmethod
    def submit(self, intent: Intent) -> ActionOutcome:
        """Apply one intent.  Rejections leave the state untouched."""

    @abstractmethod
    def snapshot(self) -> GameStateSnapshot:
        """Immutable view of the full game state."""

    @abstractmethod
    def legal_destinations(self, coord: Coord | None = None) -> frozenset[Coord]:
        """Where the selected (or given) piece may go right now."""
