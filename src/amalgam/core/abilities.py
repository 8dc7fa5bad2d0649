"""AbilityResolver - formation detection and resolution.

Each gem grants one paired ability.  A *formation* is an unordered pair of
the acting player's pieces that are each the ability's gem or a wildcard
(Amalgam, Void).  After every committed primary action the resolver looks
for formations touched by that action and reports them as pending; nothing
is destroyed until the player confirms.

    >>> resolver = AbilityResolver(registry)
    >>> pending = resolver.detect(Player.CIRCLES, [(0, 1)])
    >>> AbilityKind.FIREBALL in pending
    True
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass
from itertools import combinations

from amalgam.core.enums import AbilityKind, Player, PieceType
from amalgam.core.errors import IllegalTarget, WrongPhase
from amalgam.core.piece import Piece
from amalgam.core.policies import Destroyed, TargetMergePolicy, TidalwaveShape, counts_as
from amalgam.core.registry import PieceRegistry
from amalgam.core.types import (
    Coord,
    Direction,
    coord_name,
    direction_between,
    is_adjacent,
    points_between,
    step,
)

_LOGGER = logging.getLogger(__name__)

Pair = tuple[Coord, Coord]
Group = tuple[Coord, ...]

# Tidalwave rectangle as (depth along the ray, width across it).
TIDALWAVE_AREA = (4, 5)
TIDALWAVE_AMPLIFIED_AREA = (5, 7)


# ── Pending-ability descriptors ──────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LaunchOption:
    """One launchable piece and where it may land."""

    source: Coord
    direction: Direction
    landings: frozenset[Coord]


@dataclass(frozen=True, slots=True)
class AbilityOption:
    """A formation that passed its geometric test."""

    pair: Pair
    groups: tuple[Group, ...] = ()
    launches: tuple[LaunchOption, ...] = ()
    amplified: bool = False

    @property
    def targets(self) -> Group:
        return tuple(c for g in self.groups for c in g)

    @property
    def is_empty(self) -> bool:
        return not self.groups and not self.launches


@dataclass(frozen=True, slots=True)
class PendingAbility:
    """Everything a player may do with one ability kind this step."""

    kind: AbilityKind
    options: tuple[AbilityOption, ...]

    @property
    def groups(self) -> tuple[Group, ...]:
        return tuple(g for o in self.options for g in o.groups)

    @property
    def targets(self) -> frozenset[Coord]:
        return frozenset(c for o in self.options for c in o.targets)

    @property
    def launchable(self) -> dict[Coord, frozenset[Coord]]:
        """Launchable piece coordinate -> landing set, merged over formations."""
        merged: dict[Coord, set[Coord]] = {}
        for option in self.options:
            for launch in option.launches:
                merged.setdefault(launch.source, set()).update(launch.landings)
        return {src: frozenset(dsts) for src, dsts in merged.items()}

    @property
    def pairs(self) -> tuple[Pair, ...]:
        return tuple(o.pair for o in self.options)


# ── Resolver ─────────────────────────────────────────────────────────────────


class AbilityResolver:
    """Detects formations and applies confirmed abilities to a registry.

    Args:
        registry: Board to inspect and mutate.
        fireball_range: Steps a Fireball travels beyond its pair
            (``None`` = to the edge of the board).
        fireball_amplified_range: Fireball range when a Void stands next
            to the pair.
        launch_range: Furthest landing, in steps, for a launched piece.
        launch_amplified_range: Launch range when a Void stands next to
            the pair.
        merge_policy: How overlapping target groups are combined.
        portal_immunity: Unamplified Fireball, Tidalwave and Sap pass over
            enemy Portals.
        tidalwave_shape: Area swept by a Tidalwave.
        sap_amplified_lines: Parallel lines an amplified Sap drains.
    """

    __slots__ = (
        "_registry",
        "_fireball_range",
        "_fireball_amplified_range",
        "_launch_range",
        "_launch_amplified_range",
        "_merge_policy",
        "_portal_immunity",
        "_tidalwave_shape",
        "_sap_amplified_lines",
    )

    def __init__(
        self,
        registry: PieceRegistry,
        *,
        fireball_range: int | None = None,
        fireball_amplified_range: int | None = None,
        launch_range: int = 4,
        launch_amplified_range: int = 6,
        merge_policy: TargetMergePolicy = TargetMergePolicy.UNION,
        portal_immunity: bool = False,
        tidalwave_shape: TidalwaveShape = TidalwaveShape.RUN,
        sap_amplified_lines: int = 1,
    ) -> None:
        self._registry = registry
        self._fireball_range = fireball_range
        self._fireball_amplified_range = fireball_amplified_range
        self._launch_range = launch_range
        self._launch_amplified_range = launch_amplified_range
        self._merge_policy = merge_policy
        self._portal_immunity = portal_immunity
        self._tidalwave_shape = tidalwave_shape
        self._sap_amplified_lines = sap_amplified_lines

    # ── Detection ────────────────────────────────────────────────────────

    def detect(
        self, player: Player, moved: Collection[Coord]
    ) -> dict[AbilityKind, PendingAbility]:
        """Abilities *player* may now confirm after moving onto *moved*."""
        pending: dict[AbilityKind, PendingAbility] = {}
        for kind in AbilityKind:
            options = tuple(
                option
                for option in self._options(kind, player)
                if self._triggered(kind, player, option.pair, moved)
            )
            if options:
                pending[kind] = PendingAbility(kind, options)
        if pending:
            _LOGGER.debug(
                "%s formations after %s: %s",
                player,
                [coord_name(c) for c in moved],
                ", ".join(str(k) for k in pending),
            )
        return pending

    def standing_launch(self, player: Player) -> PendingAbility | None:
        """Launch formations *player* holds right now, with no trigger."""
        options = tuple(self._options(AbilityKind.LAUNCH, player))
        return PendingAbility(AbilityKind.LAUNCH, options) if options else None

    def availability(self, player: Player) -> dict[AbilityKind, bool]:
        """Whether each ability has any formation with a target right now."""
        return {
            kind: any(True for _ in self._options(kind, player)) for kind in AbilityKind
        }

    def formations(self, player: Player, kind: AbilityKind) -> list[Pair]:
        """Every unordered pair of *player*'s pieces usable for *kind*."""
        members = sorted(
            coord
            for coord, piece in self._registry.pieces_of(player).items()
            if counts_as(piece, kind.gem)
        )
        return list(combinations(members, 2))

    def _options(self, kind: AbilityKind, player: Player) -> Iterator[AbilityOption]:
        for pair in self.formations(player, kind):
            option = self._geometry(kind, player, pair)
            if option is not None and not option.is_empty:
                yield option

    def _geometry(
        self, kind: AbilityKind, player: Player, pair: Pair
    ) -> AbilityOption | None:
        a, b = pair
        amplified = self._is_amplified(player, pair)
        if kind == AbilityKind.LAUNCH:
            if not is_adjacent(a, b):
                return None
            return AbilityOption(
                pair, launches=self._launches(player, pair, amplified), amplified=amplified
            )

        if direction_between(a, b) is None:
            return None
        if kind == AbilityKind.FIREBALL:
            limit = self._fireball_range
            if amplified and self._fireball_amplified_range is not None:
                limit = self._fireball_amplified_range
            groups = [
                self._first_enemy(player, start, d, limit, amplified)
                for start, d in self._rays(pair)
            ]
        elif kind == AbilityKind.TIDALWAVE:
            sweep = (
                self._area if self._tidalwave_shape == TidalwaveShape.RECTANGLE
                else self._enemy_run
            )
            groups = [sweep(player, start, d, amplified) for start, d in self._rays(pair)]
        else:
            groups = [self._sap_lines(player, pair, amplified)]
        return AbilityOption(pair, groups=tuple(g for g in groups if g), amplified=amplified)

    def _triggered(
        self, kind: AbilityKind, player: Player, pair: Pair, moved: Collection[Coord]
    ) -> bool:
        for coord in moved:
            if coord in pair:
                return True
            piece = self._registry.occupant_at(coord)
            if (
                piece is not None
                and piece.owner == player
                and piece.is_void
                and any(is_adjacent(coord, member) for member in pair)
            ):
                return True
            if kind == AbilityKind.SAP and coord in points_between(*pair):
                return True
        return False

    def _is_amplified(self, player: Player, pair: Pair) -> bool:
        for coord in self._registry.pieces_of(player, PieceType.VOID):
            if coord not in pair and any(is_adjacent(coord, m) for m in pair):
                return True
        return False

    # ── Geometry ─────────────────────────────────────────────────────────

    @staticmethod
    def _rays(pair: Pair) -> list[tuple[Coord, Direction]]:
        """The two outward rays, each starting at a pair member."""
        a, b = pair
        d = direction_between(a, b)
        assert d is not None
        return [(b, d), (a, (-d[0], -d[1]))]

    def _walk(self, start: Coord, d: Direction, limit: int | None) -> Iterator[Coord]:
        topo = self._registry.topology
        distance = 1
        while limit is None or distance <= limit:
            coord = step(start, d, distance)
            if not topo.is_valid_intersection(coord):
                return
            yield coord
            distance += 1

    @staticmethod
    def _lateral(d: Direction) -> Direction:
        """Offset from a line along *d* to its nearest parallel neighbour."""
        if d[0] == 0 or d[1] == 0:
            return (-d[1], d[0])
        return (d[0], 0)

    def _targetable(self, piece: Piece, player: Player, amplified: bool) -> bool:
        if not piece.is_enemy_of(player):
            return False
        return amplified or not (self._portal_immunity and piece.is_portal)

    def _first_enemy(
        self,
        player: Player,
        start: Coord,
        d: Direction,
        limit: int | None,
        amplified: bool,
    ) -> Group:
        for coord in self._walk(start, d, limit):
            piece = self._registry.occupant_at(coord)
            if piece is None:
                continue
            if not piece.is_enemy_of(player):
                return ()
            if self._targetable(piece, player, amplified):
                return (coord,)
        return ()

    def _enemy_run(
        self, player: Player, start: Coord, d: Direction, amplified: bool
    ) -> Group:
        run: list[Coord] = []
        started = False
        for coord in self._walk(start, d, None):
            piece = self._registry.occupant_at(coord)
            if piece is None:
                if started:
                    break
                continue
            if not piece.is_enemy_of(player):
                break
            started = True
            if self._targetable(piece, player, amplified):
                run.append(coord)
        return tuple(run)

    def _area(self, player: Player, start: Coord, d: Direction, amplified: bool) -> Group:
        depth, width = TIDALWAVE_AMPLIFIED_AREA if amplified else TIDALWAVE_AREA
        lateral = self._lateral(d)
        half = width // 2
        hits: list[Coord] = []
        for distance in range(1, depth + 1):
            row = step(start, d, distance)
            for offset in range(-half, half + 1):
                coord = step(row, lateral, offset)
                piece = self._registry.occupant_at(coord)
                if piece is not None and self._targetable(piece, player, amplified):
                    hits.append(coord)
        return tuple(hits)

    def _sap_lines(self, player: Player, pair: Pair, amplified: bool) -> Group:
        a, b = pair
        d = direction_between(a, b)
        assert d is not None
        lateral = self._lateral(d)
        half = self._sap_amplified_lines // 2 if amplified else 0
        line: list[Coord] = list(points_between(a, b))
        for offset in range(1, half + 1):
            for sign in (-1, 1):
                start = step(a, lateral, sign * offset)
                end = step(b, lateral, sign * offset)
                line.extend([start, *points_between(start, end), end])
        return tuple(
            coord
            for coord in line
            if (piece := self._registry.occupant_at(coord)) is not None
            and self._targetable(piece, player, amplified)
        )

    def _launches(
        self, player: Player, pair: Pair, amplified: bool
    ) -> tuple[LaunchOption, ...]:
        limit = self._launch_amplified_range if amplified else self._launch_range
        launches: list[LaunchOption] = []
        for member, d in self._rays(pair):
            source = step(member, d)
            piece = self._registry.occupant_at(source)
            if piece is None or piece.is_enemy_of(player):
                continue
            landings = self._landings(player, source, d, limit)
            if landings:
                launches.append(LaunchOption(source, d, landings))
        return tuple(launches)

    def _landings(
        self, player: Player, source: Coord, d: Direction, limit: int
    ) -> frozenset[Coord]:
        landings: set[Coord] = set()
        for coord in self._walk(source, d, limit):
            piece = self._registry.occupant_at(coord)
            if piece is None:
                landings.add(coord)
                continue
            if piece.is_enemy_of(player):
                landings.add(coord)
            break
        return frozenset(landings)

    # ── Resolution ───────────────────────────────────────────────────────

    def offered_targets(self, pending: PendingAbility) -> tuple[Coord, ...]:
        return self._merge_policy.merge(pending.groups)

    def resolve(
        self, pending: PendingAbility, chosen: Iterable[Coord] = ()
    ) -> Destroyed:
        """Destroy the confirmed targets of a non-Launch ability.

        An empty *chosen* confirms every offered target.  Any chosen
        coordinate that was not offered rejects the whole confirmation.
        """
        if pending.kind == AbilityKind.LAUNCH:
            raise WrongPhase("Launch resolves through a piece and a landing choice")
        offered = self.offered_targets(pending)
        picked = tuple(dict.fromkeys(chosen)) or offered
        stray = [c for c in picked if c not in offered]
        if stray:
            raise IllegalTarget(
                f"{', '.join(coord_name(c) for c in stray)} not targeted by {pending.kind}"
            )
        destroyed: Destroyed = [(c, self._registry.remove(c)) for c in picked]
        _LOGGER.debug(
            "%s destroyed %s", pending.kind, [coord_name(c) for c, _ in destroyed]
        )
        return destroyed

    def launch(
        self,
        launchable: Mapping[Coord, frozenset[Coord]],
        source: Coord,
        landing: Coord,
    ) -> tuple[Piece, Destroyed]:
        """Move the launched piece, destroying an enemy on the landing."""
        if source not in launchable:
            raise IllegalTarget(f"{coord_name(source)} cannot be launched")
        if landing not in launchable[source]:
            raise IllegalTarget(
                f"{coord_name(landing)} is not a landing for {coord_name(source)}"
            )
        destroyed: Destroyed = []
        occupant = self._registry.occupant_at(landing)
        if occupant is not None:
            destroyed.append((landing, self._registry.remove(landing)))
        piece = self._registry.relocate(source, landing)
        return piece, destroyed
