"""TurnController: the central orchestrator of an Amalgam game.

Coordinates: PieceRegistry, MoveValidator, AbilityResolver, WinEvaluator.
Every state change goes through :meth:`TurnController.submit`, which
returns an :class:`ActionOutcome` and also notifies subscribed callbacks
so a UI or test can follow along.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from amalgam.core.abilities import AbilityResolver, PendingAbility
from amalgam.core.enums import AbilityKind, Player, PieceType
from amalgam.core.errors import (
    EmptySource,
    IllegalTarget,
    InvalidCoordinate,
    NotYourTurn,
    RuleViolation,
    WrongPhase,
)
from amalgam.core.move_validator import MoveValidator
from amalgam.core.piece import Piece
from amalgam.core.placement import (
    DEFAULT_ARRANGEMENT,
    GEM_ALLOTMENT,
    initial_allotments,
    placement_zone,
    validate_placement,
)
from amalgam.core.policies import Destroyed
from amalgam.core.registry import PieceRegistry
from amalgam.core.rules import WinEvaluator, WinResult
from amalgam.core.topology import BoardTopology
from amalgam.core.types import Coord, coord_name
from amalgam.game.config import GameConfig
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

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

StateCallback = Callable[[GameStateSnapshot], None]
AbilitiesCallback = Callable[[Player, dict[AbilityKind, PendingAbility]], None]
PhaseCallback = Callable[[GamePhase], None]
GameOverCallback = Callable[[WinResult], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_state_changed: list[StateCallback] = field(default_factory=list)
    on_abilities_available: list[AbilitiesCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """Result of one submitted intent."""

    ok: bool
    snapshot: GameStateSnapshot
    error: RuleViolation | None = None
    destroyed: tuple[Coord, ...] = ()
    pending: tuple[AbilityKind, ...] = ()
    destinations: frozenset[Coord] = frozenset()
    turn_ended: bool = False
    win: WinResult | None = None
    partner_pending: tuple[AbilityKind, ...] = ()

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error is not None else None


@dataclass
class _Changes:
    """What a handler did, gathered into the outcome afterwards."""

    destroyed: list[Coord] = field(default_factory=list)
    turn_ended: bool = False
    abilities_offered: bool = False
    partner: Player | None = None
    partner_pending: dict[AbilityKind, PendingAbility] = field(default_factory=dict)


# ── Controller ───────────────────────────────────────────────────────────────


class TurnController(ITurnController):
    """Runs setup and gameplay turns, one intent at a time.

    Rejected intents raise :class:`RuleViolation` internally; the
    controller catches it at this boundary, leaves the session untouched
    and returns it in the outcome.  The controller is single-threaded.
    """

    __slots__ = (
        "_config",
        "_topology",
        "_session",
        "_validator",
        "_resolver",
        "_evaluator",
        "events",
    )

    def __init__(
        self,
        config: GameConfig | None = None,
        topology: BoardTopology | None = None,
    ) -> None:
        self._config = config or GameConfig()
        self._topology = topology or BoardTopology.standard()
        self._evaluator: WinEvaluator = self._config.make_evaluator()
        self.events = GameEvents()
        self._install(PieceRegistry.initial(self._topology))

    def _install(self, registry: PieceRegistry) -> None:
        cfg = self._config
        self._session = GameSession(
            registry=registry,
            placer=cfg.first_placer,
            allotments=initial_allotments(cfg.gem_allotment),
            current_player=cfg.first_player,
        )
        self._validator = MoveValidator(registry)
        self._resolver: AbilityResolver = cfg.make_resolver(registry)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def registry(self) -> PieceRegistry:
        return self._session.registry

    @property
    def phase(self) -> GamePhase:
        return self._session.phase

    @property
    def current_player(self) -> Player:
        return self._session.acting_player

    @property
    def step(self) -> TurnStep:
        return self._session.step

    @property
    def pending(self) -> dict[AbilityKind, PendingAbility]:
        return dict(self._session.pending)

    @property
    def history(self) -> list[ActionRecord]:
        return list(self._session.history)

    @property
    def result(self) -> WinResult | None:
        return self._session.result

    # ── ITurnController impl ─────────────────────────────────────────────

    def new_game(self) -> None:
        self._install(PieceRegistry.initial(self._topology))
        _LOGGER.info("New game, %s places first", self._session.placer)
        self._emit_phase(GamePhase.SETUP)
        self._emit_state()

    def start_from(self, registry: PieceRegistry, player: Player) -> None:
        """Skip setup and begin gameplay on an arbitrary position."""
        self._install(registry)
        session = self._session
        for allot in session.allotments.values():
            for gem in allot:
                allot[gem] = 0
        session.placement_index = self._config.total_placements + 1
        session.phase = GamePhase.GAMEPLAY
        session.begin_turn(player)
        self._emit_phase(GamePhase.GAMEPLAY)
        self._emit_state()

    def snapshot(self) -> GameStateSnapshot:
        return self._session.to_snapshot()

    def submit(self, intent: Intent) -> ActionOutcome:
        changes = _Changes()
        try:
            self._check_player(intent)
            destinations = self._dispatch(intent, changes)
        except RuleViolation as exc:
            _LOGGER.debug("Rejected %s: %s", type(intent).__name__, exc)
            return ActionOutcome(ok=False, snapshot=self.snapshot(), error=exc)

        session = self._session
        snap = self.snapshot()
        if changes.abilities_offered:
            self._emit_abilities(session.current_player, dict(session.pending))
        if changes.partner is not None:
            self._emit_abilities(changes.partner, changes.partner_pending)
        self._emit_state(snap)
        if session.result is not None and changes.turn_ended:
            self._emit_game_over(session.result)
        return ActionOutcome(
            ok=True,
            snapshot=snap,
            destroyed=tuple(changes.destroyed),
            pending=tuple(session.pending),
            destinations=destinations,
            turn_ended=changes.turn_ended,
            win=session.result if changes.turn_ended else None,
            partner_pending=tuple(changes.partner_pending),
        )

    def legal_destinations(self, coord: Coord | None = None) -> frozenset[Coord]:
        session = self._session
        if session.phase != GamePhase.GAMEPLAY:
            return frozenset()
        if session.launch_stage == LaunchStage.AWAITING_LAUNCH_DESTINATION:
            assert session.launch_source is not None
            return session.launch_choices[session.launch_source]
        if session.step != TurnStep.AWAITING_ACTION:
            return frozenset()
        coord = coord if coord is not None else session.selected
        if coord is None:
            return frozenset()
        piece = session.registry.occupant_at(coord)
        if piece is None or piece.owner != session.current_player:
            return frozenset()
        return self._validator.legal_destinations(coord)

    def legal_swaps(self, coord: Coord | None = None) -> frozenset[Coord]:
        session = self._session
        if session.phase != GamePhase.GAMEPLAY or session.step != TurnStep.AWAITING_ACTION:
            return frozenset()
        coord = coord if coord is not None else session.selected
        if coord is None:
            return frozenset()
        piece = session.registry.occupant_at(coord)
        if piece is None or piece.owner != session.current_player:
            return frozenset()
        return self._validator.legal_swaps(coord)

    def placement_targets(self) -> frozenset[Coord]:
        """Empty intersections the current placer may place on."""
        session = self._session
        if session.phase != GamePhase.SETUP:
            return frozenset()
        zone = placement_zone(session.placer, self._topology)
        return frozenset(c for c in zone if session.registry.is_empty(c))

    def availability(self, player: Player | None = None) -> dict[AbilityKind, bool]:
        """Which abilities *player* could use from the current position."""
        return self._resolver.availability(player or self._session.current_player)

    # ── Dispatch ─────────────────────────────────────────────────────────

    def _check_player(self, intent: Intent) -> None:
        if self._session.phase == GamePhase.GAME_OVER:
            raise WrongPhase("The game is over")
        player = intent.player
        if player is not None and player != self._session.acting_player:
            raise NotYourTurn(f"It is {self._session.acting_player}'s turn")

    def _dispatch(self, intent: Intent, changes: _Changes) -> frozenset[Coord]:
        if isinstance(intent, PlacementIntent):
            self._place(intent)
        elif isinstance(intent, AutoSetupIntent):
            self._auto_setup()
        elif isinstance(intent, SelectIntent):
            return self._select(intent.coord)
        elif isinstance(intent, DeselectIntent):
            self._deselect()
        elif isinstance(intent, MoveIntent):
            self._move(intent, changes)
        elif isinstance(intent, SwapIntent):
            self._swap(intent, changes)
        elif isinstance(intent, LaunchSelectIntent):
            return self._launch_select(intent.piece_coord)
        elif isinstance(intent, LaunchDestinationIntent):
            self._launch_land(intent.coord, changes)
        elif isinstance(intent, AbilityConfirmIntent):
            self._confirm(intent, changes)
        elif isinstance(intent, AbilityCancelIntent):
            self._cancel()
        elif isinstance(intent, EndTurnIntent):
            self._require_step(TurnStep.AWAITING_ABILITY)
            self._end_turn(changes)
        elif isinstance(intent, ResetTurnIntent):
            self._reset_turn()
        else:
            raise TypeError(f"Unknown intent {intent!r}")
        return frozenset()

    def _require_gameplay(self) -> None:
        if self._session.phase != GamePhase.GAMEPLAY:
            raise WrongPhase(f"Not allowed during {self._session.phase.name.lower()}")

    def _require_step(self, step: TurnStep) -> None:
        self._require_gameplay()
        if self._session.step != step:
            raise WrongPhase(f"Not allowed on step {int(self._session.step)}")

    def _require_primary(self) -> None:
        self._require_step(TurnStep.AWAITING_ACTION)
        if self._session.launch_stage != LaunchStage.NONE:
            raise WrongPhase("A launch is in progress")

    def _own_piece(self, coord: Coord) -> Piece:
        if not self._topology.is_valid_intersection(coord):
            raise InvalidCoordinate(f"{coord_name(coord)} is not on the board")
        piece = self._session.registry.occupant_at(coord)
        if piece is None:
            raise EmptySource(f"No piece at {coord_name(coord)}")
        if piece.owner != self._session.current_player:
            raise NotYourTurn(f"{coord_name(coord)} belongs to {piece.owner}")
        return piece

    # ── Setup ────────────────────────────────────────────────────────────

    def _commit_placement(self, player: Player, piece_type: PieceType, coord: Coord) -> None:
        session = self._session
        validate_placement(session.registry, session.allotments, player, piece_type, coord)
        remaining = session.allotments[player][piece_type]
        ordinal = self._config.gem_allotment - remaining + 1
        piece = Piece(f"{player}_{piece_type.name.lower()}{ordinal}", player, piece_type)
        session.registry.place(piece, coord)
        session.allotments[player][piece_type] = remaining - 1
        session.history.append(
            ActionRecord(
                turn=0,
                player=player,
                action="place",
                target=coord,
                piece_type=piece_type,
            )
        )

    def _place(self, intent: PlacementIntent) -> None:
        session = self._session
        if session.phase != GamePhase.SETUP:
            raise WrongPhase("Placement is only allowed during setup")
        player = session.placer
        self._commit_placement(player, intent.piece_type, intent.coord)
        _LOGGER.debug(
            "%s placed %s on %s", player, intent.piece_type.name, coord_name(intent.coord)
        )
        session.placement_index += 1
        session.placer = player.opposite
        if session.placement_index > self._config.total_placements:
            self._begin_gameplay()

    def _auto_setup(self) -> None:
        session = self._session
        if session.phase != GamePhase.SETUP or session.placement_index != 1:
            raise WrongPhase("Auto-setup is only available before the first placement")
        if self._config.gem_allotment != GEM_ALLOTMENT:
            raise WrongPhase("Auto-setup needs the standard gem allotment")
        for player, arrangement in DEFAULT_ARRANGEMENT.items():
            for piece_type, coord in arrangement:
                self._commit_placement(player, piece_type, coord)
        session.placement_index = self._config.total_placements + 1
        _LOGGER.debug("Auto-setup filled the default arrangement")
        self._begin_gameplay()

    def _begin_gameplay(self) -> None:
        session = self._session
        session.phase = GamePhase.GAMEPLAY
        session.begin_turn(self._config.first_player)
        _LOGGER.info("Setup complete, %s moves first", session.current_player)
        self._emit_phase(GamePhase.GAMEPLAY)

    # ── Step 1: primary actions ──────────────────────────────────────────

    def _select(self, coord: Coord) -> frozenset[Coord]:
        self._require_gameplay()
        session = self._session
        in_step_one = (
            session.step == TurnStep.AWAITING_ACTION and session.launch_stage == LaunchStage.NONE
        )
        piece = session.registry.occupant_at(coord)
        if piece is None:
            # Clicking empty or off-board space is a no-op.
            if in_step_one:
                session.selected = None
            return frozenset()
        if not in_step_one:
            raise WrongPhase("Selection is only possible before the turn's action")
        if piece.owner != session.current_player:
            raise NotYourTurn(f"{coord_name(coord)} belongs to {piece.owner}")
        session.selected = coord
        return self._validator.legal_destinations(coord)

    def _deselect(self) -> None:
        self._require_gameplay()
        session = self._session
        session.selected = None
        if session.launch_is_primary:
            session.clear_launch()

    def _source_of(self, source: Coord | None) -> Coord:
        src = source if source is not None else self._session.selected
        if src is None:
            raise WrongPhase("No piece selected")
        self._own_piece(src)
        return src

    def _move(self, intent: MoveIntent, changes: _Changes) -> None:
        self._require_primary()
        src = self._source_of(intent.source)
        piece = self._validator.validate_move(src, intent.coord)
        self._session.registry.relocate(src, intent.coord)
        _LOGGER.debug(
            "%s moved %s %s -> %s",
            piece.owner,
            piece.piece_type.name,
            coord_name(src),
            coord_name(intent.coord),
        )
        self._after_primary("move", src, intent.coord, piece, [intent.coord], changes)

    def _swap(self, intent: SwapIntent, changes: _Changes) -> None:
        self._require_primary()
        src = self._source_of(intent.source)
        portal, partner = self._validator.validate_swap(src, intent.coord)
        session = self._session
        session.registry.swap(src, intent.coord)
        _LOGGER.debug(
            "%s swapped %s <-> %s", portal.owner, coord_name(src), coord_name(intent.coord)
        )
        self._after_primary("swap", src, intent.coord, portal, [intent.coord, src], changes)

        # An enemy partner's formations are reported, never resolved out of turn.
        if (
            partner.owner != portal.owner
            and self._config.report_partner_abilities
            and session.phase == GamePhase.GAMEPLAY
            and session.registry.occupant_at(src) == partner
        ):
            pending = self._resolver.detect(partner.owner, [src])
            if pending:
                changes.partner = partner.owner
                changes.partner_pending = pending

    def _after_primary(
        self,
        action: str,
        src: Coord,
        dst: Coord,
        piece: Piece,
        landed: list[Coord],
        changes: _Changes,
        landed_on: Destroyed | None = None,
    ) -> None:
        session = self._session
        player = session.current_player
        registry = session.registry

        landed_on = landed_on or []
        destroyed: Destroyed = list(landed_on)
        for coord in landed:
            if registry.occupant_at(coord) is not None:
                destroyed.extend(self._config.capture_policy.resolve(registry, coord))
        changes.destroyed.extend(c for c, _ in destroyed[len(landed_on):])

        moved = [
            c for c in landed if (p := registry.occupant_at(c)) is not None and p.owner == player
        ]
        session.moved.extend(moved)
        session.selected = None
        session.step = TurnStep.AWAITING_ABILITY
        session.history.append(
            ActionRecord(
                turn=session.turn,
                player=player,
                action=action,
                source=src,
                target=dst,
                piece_type=piece.piece_type,
                destroyed=tuple(c for c, _ in destroyed),
            )
        )

        pending = self._resolver.detect(player, moved)
        if pending:
            session.pending = pending
            if AbilityKind.LAUNCH in pending:
                session.launch_stage = LaunchStage.AWAITING_LAUNCH_SOURCE
                session.launch_choices = pending[AbilityKind.LAUNCH].launchable
            changes.abilities_offered = True
            return
        self._end_turn(changes)

    # ── Launch sub-state machine ─────────────────────────────────────────

    def _launch_select(self, coord: Coord) -> frozenset[Coord]:
        self._require_gameplay()
        session = self._session
        if session.step == TurnStep.AWAITING_ACTION and session.launch_stage == LaunchStage.NONE:
            standing = self._resolver.standing_launch(session.current_player)
            if standing is None:
                raise WrongPhase("No Launch formation on the board")
            choices = standing.launchable
            primary = True
        elif session.launch_stage != LaunchStage.NONE:
            choices = session.launch_choices
            primary = session.launch_is_primary
        else:
            raise WrongPhase("No Launch is available")

        if coord not in choices:
            raise IllegalTarget(f"{coord_name(coord)} cannot be launched")
        session.launch_choices = choices
        session.launch_is_primary = primary
        session.launch_source = coord
        session.launch_stage = LaunchStage.AWAITING_LAUNCH_DESTINATION
        session.selected = coord
        return choices[coord]

    def _launch_land(self, landing: Coord, changes: _Changes) -> None:
        self._require_gameplay()
        session = self._session
        if session.launch_stage != LaunchStage.AWAITING_LAUNCH_DESTINATION:
            raise WrongPhase("Select a piece to launch first")
        source = session.launch_source
        assert source is not None
        piece, destroyed = self._resolver.launch(session.launch_choices, source, landing)
        changes.destroyed.extend(c for c, _ in destroyed)
        _LOGGER.debug("%s launched %s -> %s", piece.owner, coord_name(source), coord_name(landing))

        if session.launch_is_primary:
            session.clear_launch()
            self._after_primary(
                "launch", source, landing, piece, [landing], changes, landed_on=destroyed
            )
            return

        capture = self._config.capture_policy.resolve(session.registry, landing)
        changes.destroyed.extend(c for c, _ in capture)
        destroyed.extend(capture)
        session.moved.append(landing)
        session.history.append(
            ActionRecord(
                turn=session.turn,
                player=piece.owner,
                action="ability",
                source=source,
                target=landing,
                piece_type=piece.piece_type,
                ability=AbilityKind.LAUNCH,
                destroyed=tuple(c for c, _ in destroyed),
            )
        )
        self._end_turn(changes)

    # ── Step 2: abilities ────────────────────────────────────────────────

    def _confirm(self, intent: AbilityConfirmIntent, changes: _Changes) -> None:
        self._require_step(TurnStep.AWAITING_ABILITY)
        session = self._session
        pending = session.pending.get(intent.kind)
        if pending is None:
            raise WrongPhase(f"{intent.kind} is not pending")
        if intent.kind == AbilityKind.LAUNCH:
            raise WrongPhase("Launch is confirmed by choosing a piece and a landing")
        destroyed = self._resolver.resolve(pending, intent.chosen_targets)
        changes.destroyed.extend(c for c, _ in destroyed)
        session.history.append(
            ActionRecord(
                turn=session.turn,
                player=session.current_player,
                action="ability",
                ability=intent.kind,
                destroyed=tuple(c for c, _ in destroyed),
            )
        )
        self._end_turn(changes)

    def _cancel(self) -> None:
        self._require_step(TurnStep.AWAITING_ABILITY)
        session = self._session
        if not session.pending:
            raise WrongPhase("No ability is pending")
        session.pending = {}
        session.clear_launch()
        session.selected = None

    # ── Turn boundaries ──────────────────────────────────────────────────

    def _end_turn(self, changes: _Changes) -> None:
        session = self._session
        player = session.current_player
        changes.turn_ended = True
        result = self._evaluator.evaluate(session.registry, player, session.moved)
        if result is not None:
            session.result = result
            session.phase = GamePhase.GAME_OVER
            session.pending = {}
            session.clear_launch()
            session.selected = None
            _LOGGER.info("%s wins by %s", result.winner, result.victory_type.name.lower())
            self._emit_phase(GamePhase.GAME_OVER)
            return
        session.begin_turn(player.opposite)

    def _reset_turn(self) -> None:
        self._require_gameplay()
        dropped = self._session.rollback()
        _LOGGER.debug(
            "%s reset turn %d (%d actions undone)",
            self._session.current_player,
            self._session.turn,
            dropped,
        )

    # ── Event emission ───────────────────────────────────────────────────

    def _emit_state(self, snap: GameStateSnapshot | None = None) -> None:
        if not self.events.on_state_changed:
            return
        snap = snap or self.snapshot()
        for cb in self.events.on_state_changed:
            cb(snap)

    def _emit_abilities(
        self, player: Player, pending: dict[AbilityKind, PendingAbility]
    ) -> None:
        for cb in self.events.on_abilities_available:
            cb(player, pending)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_game_over(self, result: WinResult) -> None:
        for cb in self.events.on_game_over:
            cb(result)
