"""Pluggable rule variants.

The published rules disagree on a few points (whether moving next to an
enemy captures it, what counts towards elimination, who opens the game,
how overlapping ability target groups combine).  Each choice is a small
policy object selected through :class:`~amalgam.game.config.GameConfig`.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum, auto
from typing import Protocol

from amalgam.core.enums import Player, PieceType
from amalgam.core.piece import Piece
from amalgam.core.registry import PieceRegistry
from amalgam.core.types import Coord

Destroyed = list[tuple[Coord, Piece]]


# ── Attack resolution ────────────────────────────────────────────────────────


class CapturePolicy(Protocol):
    """Applied to every committed destination of a move, swap or launch."""

    def resolve(self, registry: PieceRegistry, coord: Coord) -> Destroyed: ...


class NoCapture:
    """Movement never destroys anything; only abilities do."""

    __slots__ = ()

    def resolve(self, registry: PieceRegistry, coord: Coord) -> Destroyed:
        return []

    def __repr__(self) -> str:
        return "NoCapture()"


class AdjacentCombat:
    """Combat table from the printed player guide.

    Gems and the Amalgam destroy adjacent enemy non-Portals.  The Void
    destroys every adjacent enemy.  A Portal destroys enemy Portals that
    are adjacent or rail-connected to it.
    """

    __slots__ = ()

    def resolve(self, registry: PieceRegistry, coord: Coord) -> Destroyed:
        attacker = registry.occupant_at(coord)
        if attacker is None:
            return []
        topo = registry.topology
        candidates = set(topo.adjacent_intersections(coord))
        if attacker.is_portal:
            candidates |= topo.rail_neighbors(coord)

        destroyed: Destroyed = []
        for target_coord in sorted(candidates):
            target = registry.occupant_at(target_coord)
            if target is None or not target.is_enemy_of(attacker):
                continue
            if self._defeats(attacker, target):
                destroyed.append((target_coord, registry.remove(target_coord)))
        return destroyed

    @staticmethod
    def _defeats(attacker: Piece, target: Piece) -> bool:
        if attacker.is_void:
            return True
        if attacker.is_portal:
            return target.is_portal
        return not target.is_portal

    def __repr__(self) -> str:
        return "AdjacentCombat()"


# ── Elimination subset ───────────────────────────────────────────────────────


class EliminationPolicy(IntEnum):
    """Which pieces a player must lose to be eliminated."""

    ALL_PIECES = auto()
    GEMS_ONLY = auto()
    ALL_BUT_PORTALS = auto()

    def counts(self, piece: Piece) -> bool:
        if self == EliminationPolicy.GEMS_ONLY:
            return piece.is_gem
        if self == EliminationPolicy.ALL_BUT_PORTALS:
            return not piece.is_portal
        return True

    def is_eliminated(self, registry: PieceRegistry, player: Player) -> bool:
        return not any(self.counts(p) for p in registry.pieces_of(player).values())


# ── Opening side ─────────────────────────────────────────────────────────────


class FirstMoverPolicy(IntEnum):
    """Who makes the first gameplay move once setup is complete."""

    FIRST_PLACER = auto()
    SECOND_PLACER = auto()
    CIRCLES = auto()
    SQUARES = auto()

    def resolve(self, first_placer: Player) -> Player:
        if self == FirstMoverPolicy.FIRST_PLACER:
            return first_placer
        if self == FirstMoverPolicy.SECOND_PLACER:
            return first_placer.opposite
        if self == FirstMoverPolicy.CIRCLES:
            return Player.CIRCLES
        return Player.SQUARES


# ── Overlapping ability targets ──────────────────────────────────────────────


class TargetMergePolicy(IntEnum):
    """How target groups from several formations are combined on confirm."""

    UNION = auto()
    FIRST_GROUP = auto()

    def merge(self, groups: Iterable[Iterable[Coord]]) -> tuple[Coord, ...]:
        merged: list[Coord] = []
        for group in groups:
            for coord in group:
                if coord not in merged:
                    merged.append(coord)
            if self == TargetMergePolicy.FIRST_GROUP and merged:
                break
        return tuple(merged)


# ── Tidalwave reach ──────────────────────────────────────────────────────────


class TidalwaveShape(IntEnum):
    """Area a confirmed Tidalwave sweeps beyond each end of its pair."""

    RUN = auto()  # first contiguous run of enemies on each ray
    RECTANGLE = auto()  # fixed depth x width block, wider when amplified


def counts_as(piece: Piece, gem: PieceType) -> bool:
    """Whether *piece* may stand in for *gem* in a formation."""
    return piece.piece_type == gem or piece.piece_type.is_wildcard
