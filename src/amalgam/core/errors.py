"""Rule-violation taxonomy.

Every rejected intent maps to exactly one of these.  They are all
recoverable: the state is left unchanged and the caller re-issues a
corrected intent.
"""

from __future__ import annotations


class RuleViolation(ValueError):
    """Base class for every rejected action."""

    code = "rule_violation"


class InvalidCoordinate(RuleViolation):
    code = "invalid_coordinate"


class EmptySource(InvalidCoordinate):
    """No piece stands on the source intersection."""

    code = "empty_source"


class OccupiedDestination(RuleViolation):
    code = "occupied_destination"


class IllegalMoveShape(RuleViolation):
    """Destination is neither adjacent nor a valid rail traversal."""

    code = "illegal_move_shape"


class NotYourTurn(RuleViolation):
    code = "not_your_turn"


class WrongPhase(RuleViolation):
    """Intent does not fit the current phase, step or sub-state."""

    code = "wrong_phase"


class AllotmentExceeded(RuleViolation):
    code = "allotment_exceeded"


class OutsidePlacementZone(RuleViolation):
    code = "outside_placement_zone"


class IllegalTarget(RuleViolation):
    """Chosen ability target or launch piece was not on offer."""

    code = "illegal_target"
