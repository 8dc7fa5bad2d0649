"""Game configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from amalgam.core.abilities import AbilityResolver
from amalgam.core.enums import GEM_TYPES, Player
from amalgam.core.placement import GEM_ALLOTMENT
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
from amalgam.core.rules import WinEvaluator, default_objectives
from amalgam.core.types import Coord


@dataclass
class GameConfig:
    """Rule variants and tunables for one game.

    Defaults follow the tournament reading of the rules: movement never
    captures, every piece counts towards elimination and Squares both
    place and move first.
    """

    first_placer: Player = Player.SQUARES
    first_mover: FirstMoverPolicy = FirstMoverPolicy.FIRST_PLACER
    gem_allotment: int = GEM_ALLOTMENT
    capture_policy: CapturePolicy = field(default_factory=NoCapture)
    elimination: EliminationPolicy = EliminationPolicy.ALL_PIECES
    target_merge: TargetMergePolicy = TargetMergePolicy.UNION
    fireball_range: int | None = None
    fireball_amplified_range: int | None = None
    launch_range: int = 4
    launch_amplified_range: int = 6
    objectives: dict[Player, Coord] = field(default_factory=default_objectives)
    portal_immunity: bool = False
    tidalwave_shape: TidalwaveShape = TidalwaveShape.RUN
    sap_amplified_lines: int = 1
    report_partner_abilities: bool = False

    def __post_init__(self) -> None:
        if self.gem_allotment < 1:
            raise ValueError("gem_allotment must be at least 1")
        for name in ("fireball_range", "fireball_amplified_range"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be positive or None")
        if self.launch_range < 1 or self.launch_amplified_range < 1:
            raise ValueError("launch ranges must be positive")
        if self.sap_amplified_lines < 1 or self.sap_amplified_lines % 2 == 0:
            raise ValueError("sap_amplified_lines must be a positive odd number")

    @classmethod
    def player_guide(cls) -> GameConfig:
        """Variant printed in the player guide.

        Adjacency combat, ranged Fireball, rectangular Tidalwave and a
        three-line amplified Sap.  Portals are immune to unamplified
        abilities and do not count towards elimination.
        """
        return cls(
            capture_policy=AdjacentCombat(),
            elimination=EliminationPolicy.ALL_BUT_PORTALS,
            fireball_range=6,
            fireball_amplified_range=9,
            portal_immunity=True,
            tidalwave_shape=TidalwaveShape.RECTANGLE,
            sap_amplified_lines=3,
        )

    @property
    def total_placements(self) -> int:
        return self.gem_allotment * len(GEM_TYPES) * len(Player)

    @property
    def first_player(self) -> Player:
        return self.first_mover.resolve(self.first_placer)

    def make_resolver(self, registry: PieceRegistry) -> AbilityResolver:
        return AbilityResolver(
            registry,
            fireball_range=self.fireball_range,
            fireball_amplified_range=self.fireball_amplified_range,
            launch_range=self.launch_range,
            launch_amplified_range=self.launch_amplified_range,
            merge_policy=self.target_merge,
            portal_immunity=self.portal_immunity,
            tidalwave_shape=self.tidalwave_shape,
            sap_amplified_lines=self.sap_amplified_lines,
        )

    def make_evaluator(self) -> WinEvaluator:
        return WinEvaluator(self.objectives, self.elimination)
