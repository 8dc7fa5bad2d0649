"""Core domain layer: pure Amalgam rules with zero external dependencies.

Quick start::

    from amalgam.core import MoveValidator, PieceRegistry

    registry = PieceRegistry.initial()
    validator = MoveValidator(registry)
    print(validator.legal_destinations((6, 6)))
"""

from amalgam.core.abilities import (
    AbilityOption,
    AbilityResolver,
    LaunchOption,
    PendingAbility,
)
from amalgam.core.enums import GEM_TYPES, AbilityKind, Player, PieceType, VictoryType
from amalgam.core.errors import (
    AllotmentExceeded,
    EmptySource,
    IllegalMoveShape,
    IllegalTarget,
    InvalidCoordinate,
    NotYourTurn,
    OccupiedDestination,
    OutsidePlacementZone,
    RuleViolation,
    WrongPhase,
)
from amalgam.core.move_validator import MoveValidator
from amalgam.core.piece import Piece
from amalgam.core.placement import DEFAULT_ARRANGEMENT, placement_zone
from amalgam.core.policies import (
    AdjacentCombat,
    CapturePolicy,
    EliminationPolicy,
    FirstMoverPolicy,
    NoCapture,
    TargetMergePolicy,
    TidalwaveShape,
)
from amalgam.core.registry import PieceRegistry
from amalgam.core.rules import WinEvaluator, WinResult
from amalgam.core.topology import BoardTopology
from amalgam.core.types import Coord, coord_name

__all__ = [
    # Enums
    "AbilityKind",
    "GEM_TYPES",
    "Player",
    "PieceType",
    "VictoryType",
    # Types / helpers
    "Coord",
    "coord_name",
    # Errors
    "AllotmentExceeded",
    "EmptySource",
    "IllegalMoveShape",
    "IllegalTarget",
    "InvalidCoordinate",
    "NotYourTurn",
    "OccupiedDestination",
    "OutsidePlacementZone",
    "RuleViolation",
    "WrongPhase",
    # Domain objects
    "AbilityOption",
    "AbilityResolver",
    "BoardTopology",
    "LaunchOption",
    "MoveValidator",
    "PendingAbility",
    "Piece",
    "PieceRegistry",
    "WinEvaluator",
    "WinResult",
    # Setup
    "DEFAULT_ARRANGEMENT",
    "placement_zone",
    # Policies
    "AdjacentCombat",
    "CapturePolicy",
    "EliminationPolicy",
    "FirstMoverPolicy",
    "NoCapture",
    "TargetMergePolicy",
    "TidalwaveShape",
]
