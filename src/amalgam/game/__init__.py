"""Game management layer: turn controller, intents and session state.

Quick start::

    from amalgam.game import AutoSetupIntent, MoveIntent, TurnController

    ctrl = TurnController()
    ctrl.submit(AutoSetupIntent())
    outcome = ctrl.submit(MoveIntent((1, -6), source=(1, -5)))
"""

from amalgam.game.config import GameConfig
from amalgam.game.controller import ActionOutcome, GameEvents, TurnController
from amalgam.game.intents import (
    AbilityCancelIntent,
    AbilityConfirmIntent,
    AutoSetupIntent,
    DeselectIntent,
    EndTurnIntent,
    Intent,
    LaunchDestinationIntent,
    LaunchSelectIntent,
    MoveIntent,
    PlacementIntent,
    ResetTurnIntent,
    SelectIntent,
    SwapIntent,
)
from amalgam.game.interfaces import GamePhase, ITurnController, LaunchStage, TurnStep
from amalgam.game.state import ActionRecord, GameSession, GameStateSnapshot

__all__ = [
    # Interfaces
    "GamePhase",
    "ITurnController",
    "LaunchStage",
    "TurnStep",
    # Intents
    "AbilityCancelIntent",
    "AbilityConfirmIntent",
    "AutoSetupIntent",
    "DeselectIntent",
    "EndTurnIntent",
    "Intent",
    "LaunchDestinationIntent",
    "LaunchSelectIntent",
    "MoveIntent",
    "PlacementIntent",
    "ResetTurnIntent",
    "SelectIntent",
    "SwapIntent",
    # Concrete
    "ActionOutcome",
    "ActionRecord",
    "GameConfig",
    "GameEvents",
    "GameSession",
    "GameStateSnapshot",
    "TurnController",
]
