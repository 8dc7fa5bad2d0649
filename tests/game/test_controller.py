"""Tests for TurnController, the orchestrator."""

from amalgam.core.enums import AbilityKind, Player, PieceType, VictoryType
from amalgam.core.errors import (
    AllotmentExceeded,
    IllegalTarget,
    NotYourTurn,
    OutsidePlacementZone,
    WrongPhase,
)
from amalgam.core.piece import Piece
from amalgam.core.placement import DEFAULT_ARRANGEMENT
from amalgam.core.policies import AdjacentCombat, FirstMoverPolicy
from amalgam.core.registry import PieceRegistry
from amalgam.core.rules import WinResult
from amalgam.game.config import GameConfig
from amalgam.game.controller import TurnController
from amalgam.game.intents import (
    AbilityCancelIntent,
    AbilityConfirmIntent,
    AutoSetupIntent,
    DeselectIntent,
    EndTurnIntent,
    LaunchDestinationIntent,
    LaunchSelectIntent,
    MoveIntent,
    PlacementIntent,
    ResetTurnIntent,
    SelectIntent,
    SwapIntent,
)
from amalgam.game.interfaces import GamePhase, LaunchStage, TurnStep
from amalgam.game.state import GameStateSnapshot

C = Player.CIRCLES
S = Player.SQUARES


def _make_controller(
    *entries: tuple[Player, PieceType, tuple[int, int]],
    player: Player = C,
    config: GameConfig | None = None,
) -> TurnController:
    """Helper: controller in gameplay on a hand-built position."""
    registry = PieceRegistry()
    for i, (owner, ptype, coord) in enumerate(entries):
        registry.place(Piece(f"p{i}", owner, ptype), coord)
    ctrl = TurnController(config)
    ctrl.start_from(registry, player)
    return ctrl


def _fireball_position(*, spare: bool = True) -> TurnController:
    entries = [
        (C, PieceType.RUBY, (0, 0)),
        (C, PieceType.RUBY, (2, 1)),
        (S, PieceType.PEARL, (5, 0)),
    ]
    if spare:
        entries.append((S, PieceType.AMBER, (0, -10)))
    return _make_controller(*entries)


# ── Setup ────────────────────────────────────────────────────────────────────


class TestSetup:
    def test_initial_state(self) -> None:
        ctrl = TurnController()
        assert ctrl.phase == GamePhase.SETUP
        assert ctrl.current_player == S
        assert ctrl.snapshot().placement_index == 1
        assert len(ctrl.registry) == 8

    def test_placement_alternates(self) -> None:
        ctrl = TurnController()
        outcome = ctrl.submit(PlacementIntent(PieceType.RUBY, (1, -5), player=S))
        assert outcome.ok
        assert ctrl.current_player == C
        assert ctrl.snapshot().placement_index == 2
        assert ctrl.snapshot().allotments[S][PieceType.RUBY] == 1
        assert ctrl.registry[(1, -5)].piece_id == "squares_ruby1"

    def test_wrong_placer(self) -> None:
        ctrl = TurnController()
        outcome = ctrl.submit(PlacementIntent(PieceType.RUBY, (1, 5), player=C))
        assert not outcome.ok
        assert isinstance(outcome.error, NotYourTurn)
        assert outcome.error_code == "not_your_turn"

    def test_outside_zone(self) -> None:
        ctrl = TurnController()
        outcome = ctrl.submit(PlacementIntent(PieceType.RUBY, (1, 5)))
        assert isinstance(outcome.error, OutsidePlacementZone)
        assert ctrl.snapshot().placement_index == 1

    def test_third_gem_rejected(self) -> None:
        ctrl = TurnController()
        for coord in [(1, -5), (1, 5), (-1, -5), (-1, 5)]:
            assert ctrl.submit(PlacementIntent(PieceType.RUBY, coord)).ok
        before = ctrl.registry.snapshot()
        outcome = ctrl.submit(PlacementIntent(PieceType.RUBY, (2, -5)))
        assert isinstance(outcome.error, AllotmentExceeded)
        assert ctrl.registry.snapshot() == before
        assert ctrl.snapshot().placement_index == 5
        assert ctrl.current_player == S

    def test_non_gem_placement(self) -> None:
        ctrl = TurnController()
        outcome = ctrl.submit(PlacementIntent(PieceType.PORTAL, (1, -5)))
        assert isinstance(outcome.error, AllotmentExceeded)

    def test_sixteen_placements_start_gameplay(self) -> None:
        ctrl = TurnController()
        phases: list[GamePhase] = []
        ctrl.events.on_phase_changed.append(phases.append)
        for (s_type, s_coord), (c_type, c_coord) in zip(
            DEFAULT_ARRANGEMENT[S], DEFAULT_ARRANGEMENT[C]
        ):
            assert ctrl.submit(PlacementIntent(s_type, s_coord, player=S)).ok
            assert ctrl.submit(PlacementIntent(c_type, c_coord, player=C)).ok
        assert ctrl.phase == GamePhase.GAMEPLAY
        assert phases == [GamePhase.GAMEPLAY]
        assert ctrl.current_player == S
        assert ctrl.step == TurnStep.AWAITING_ACTION
        assert len(ctrl.registry) == 24

    def test_gameplay_intent_during_setup(self) -> None:
        ctrl = TurnController()
        outcome = ctrl.submit(MoveIntent((0, -7), source=(0, -6)))
        assert isinstance(outcome.error, WrongPhase)

    def test_auto_setup(self, started: TurnController) -> None:
        assert started.phase == GamePhase.GAMEPLAY
        assert len(started.registry.pieces_of(S)) == 12
        assert len(started.registry.pieces_of(C)) == 12
        assert all(n == 0 for n in started.snapshot().allotments[C].values())

    def test_auto_setup_only_at_start(self) -> None:
        ctrl = TurnController()
        ctrl.submit(PlacementIntent(PieceType.RUBY, (1, -5)))
        outcome = ctrl.submit(AutoSetupIntent())
        assert isinstance(outcome.error, WrongPhase)

    def test_configurable_first_mover(self) -> None:
        config = GameConfig(first_mover=FirstMoverPolicy.SECOND_PLACER)
        ctrl = TurnController(config)
        assert ctrl.current_player == S
        ctrl.submit(AutoSetupIntent())
        assert ctrl.current_player == C

    def test_new_game_resets(self, started: TurnController) -> None:
        started.new_game()
        assert started.phase == GamePhase.SETUP
        assert len(started.registry) == 8
        assert started.history == []


# ── Primary actions ──────────────────────────────────────────────────────────


class TestPrimaryActions:
    def test_move_without_ability_ends_turn(self, started: TurnController) -> None:
        outcome = started.submit(MoveIntent((1, -4), source=(1, -5), player=S))
        assert outcome.ok
        assert outcome.turn_ended
        assert outcome.pending == ()
        assert started.current_player == C
        assert started.step == TurnStep.AWAITING_ACTION
        assert started.registry[(1, -4)].piece_type == PieceType.RUBY

    def test_select_then_move(self, started: TurnController) -> None:
        outcome = started.submit(SelectIntent((1, -5)))
        assert outcome.ok
        assert (1, -4) in outcome.destinations
        assert started.legal_destinations() == outcome.destinations
        assert started.submit(MoveIntent((1, -4))).ok

    def test_select_empty_is_noop(self, started: TurnController) -> None:
        outcome = started.submit(SelectIntent((3, 0)))
        assert outcome.ok
        assert outcome.destinations == frozenset()
        assert started.snapshot().selected is None

    def test_deselect(self, started: TurnController) -> None:
        started.submit(SelectIntent((1, -5)))
        started.submit(DeselectIntent())
        outcome = started.submit(MoveIntent((1, -4)))
        assert isinstance(outcome.error, WrongPhase)

    def test_select_enemy(self, started: TurnController) -> None:
        outcome = started.submit(SelectIntent((1, 5)))
        assert isinstance(outcome.error, NotYourTurn)

    def test_move_enemy_piece(self, started: TurnController) -> None:
        outcome = started.submit(MoveIntent((1, 4), source=(1, 5)))
        assert isinstance(outcome.error, NotYourTurn)

    def test_wrong_player(self, started: TurnController) -> None:
        outcome = started.submit(MoveIntent((1, -4), source=(1, -5), player=C))
        assert isinstance(outcome.error, NotYourTurn)
        assert started.registry[(1, -5)] is not None

    def test_illegal_shape_leaves_state(self, started: TurnController) -> None:
        before = started.snapshot()
        outcome = started.submit(MoveIntent((1, -2), source=(1, -5)))
        assert outcome.error_code == "illegal_move_shape"
        assert started.snapshot() == before

    def test_portal_rail_jump(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.PORTAL, (6, 6)),
            (S, PieceType.RUBY, (-10, 0)),
        )
        assert (6, -6) in ctrl.legal_destinations((6, 6))
        outcome = ctrl.submit(MoveIntent((6, -6), source=(6, 6)))
        assert outcome.ok
        assert ctrl.registry[(6, -6)].is_portal

    def test_swap(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.PORTAL, (6, 6)),
            (C, PieceType.RUBY, (0, 0)),
            (S, PieceType.RUBY, (-10, 0)),
        )
        assert (0, 0) in ctrl.legal_swaps((6, 6))
        outcome = ctrl.submit(SwapIntent((0, 0), source=(6, 6)))
        assert outcome.ok
        assert ctrl.registry[(0, 0)].is_portal
        assert ctrl.registry[(6, 6)].piece_type == PieceType.RUBY
        assert ctrl.history[-1].action == "swap"

    def test_swap_requires_portal(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.RUBY, (0, 0)),
            (C, PieceType.JADE, (1, 0)),
            (S, PieceType.RUBY, (-10, 0)),
        )
        outcome = ctrl.submit(SwapIntent((1, 0), source=(0, 0)))
        assert outcome.error_code == "illegal_move_shape"

    def test_state_event_only_on_success(self, started: TurnController) -> None:
        snapshots: list[GameStateSnapshot] = []
        started.events.on_state_changed.append(snapshots.append)
        started.submit(MoveIntent((1, -2), source=(1, -5)))
        assert snapshots == []
        started.submit(MoveIntent((1, -4), source=(1, -5)))
        assert len(snapshots) == 1
        assert snapshots[0].active_player == C


# ── Abilities ────────────────────────────────────────────────────────────────


class TestAbilities:
    def test_move_reveals_pending_ability(self) -> None:
        ctrl = _fireball_position()
        offered: list[tuple[Player, set[AbilityKind]]] = []
        ctrl.events.on_abilities_available.append(lambda p, pend: offered.append((p, set(pend))))
        outcome = ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        assert outcome.ok
        assert outcome.pending == (AbilityKind.FIREBALL,)
        assert not outcome.turn_ended
        assert ctrl.step == TurnStep.AWAITING_ABILITY
        assert ctrl.current_player == C
        assert offered == [(C, {AbilityKind.FIREBALL})]

    def test_confirm_destroys_and_ends_turn(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(AbilityConfirmIntent(AbilityKind.FIREBALL))
        assert outcome.ok
        assert outcome.destroyed == ((5, 0),)
        assert outcome.turn_ended
        assert ctrl.current_player == S
        assert ctrl.step == TurnStep.AWAITING_ACTION
        assert ctrl.pending == {}

    def test_confirm_rejects_unoffered_target(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(AbilityConfirmIntent(AbilityKind.FIREBALL, ((0, -10),)))
        assert isinstance(outcome.error, IllegalTarget)
        assert ctrl.registry[(0, -10)] is not None
        assert ctrl.step == TurnStep.AWAITING_ABILITY

    def test_confirm_on_step_one(self) -> None:
        ctrl = _fireball_position()
        outcome = ctrl.submit(AbilityConfirmIntent(AbilityKind.FIREBALL))
        assert isinstance(outcome.error, WrongPhase)

    def test_confirm_kind_not_pending(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(AbilityConfirmIntent(AbilityKind.SAP))
        assert isinstance(outcome.error, WrongPhase)

    def test_cancel_keeps_turn(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(AbilityCancelIntent())
        assert outcome.ok
        assert ctrl.pending == {}
        assert ctrl.step == TurnStep.AWAITING_ABILITY
        assert ctrl.current_player == C

        again = ctrl.submit(AbilityConfirmIntent(AbilityKind.FIREBALL))
        assert isinstance(again.error, WrongPhase)

        ended = ctrl.submit(EndTurnIntent())
        assert ended.turn_ended
        assert ctrl.current_player == S
        assert ctrl.registry[(5, 0)] is not None

    def test_end_turn_needs_action(self) -> None:
        ctrl = _fireball_position()
        outcome = ctrl.submit(EndTurnIntent())
        assert isinstance(outcome.error, WrongPhase)

    def test_no_second_primary_action(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(MoveIntent((-1, 0), source=(0, 0)))
        assert isinstance(outcome.error, WrongPhase)

    def test_sap_on_segment(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.AMBER, (-3, 0)),
            (C, PieceType.AMBER, (3, 0)),
            (C, PieceType.RUBY, (0, 1)),
            (S, PieceType.RUBY, (-1, 0)),
            (S, PieceType.AMBER, (0, -10)),
        )
        outcome = ctrl.submit(MoveIntent((0, 0), source=(0, 1)))
        assert outcome.pending == (AbilityKind.SAP,)
        confirm = ctrl.submit(AbilityConfirmIntent(AbilityKind.SAP))
        assert confirm.destroyed == ((-1, 0),)

    def test_availability(self) -> None:
        ctrl = _fireball_position()
        assert not ctrl.availability()[AbilityKind.FIREBALL]
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        assert ctrl.availability(C)[AbilityKind.FIREBALL]


# ── Launch ───────────────────────────────────────────────────────────────────


class TestLaunch:
    def _triggered(self) -> TurnController:
        ctrl = _make_controller(
            (C, PieceType.JADE, (0, 0)),
            (C, PieceType.JADE, (2, 1)),
            (C, PieceType.RUBY, (2, 0)),
            (S, PieceType.PEARL, (4, 0)),
            (S, PieceType.AMBER, (0, -10)),
        )
        outcome = ctrl.submit(MoveIntent((1, 0), source=(2, 1)))
        assert outcome.pending == (AbilityKind.LAUNCH,)
        return ctrl

    def test_two_step_launch(self) -> None:
        ctrl = self._triggered()
        assert ctrl.snapshot().launch_stage == LaunchStage.AWAITING_LAUNCH_SOURCE

        select = ctrl.submit(LaunchSelectIntent((2, 0)))
        assert select.ok
        assert select.destinations == {(3, 0), (4, 0)}
        assert ctrl.legal_destinations() == {(3, 0), (4, 0)}
        assert ctrl.snapshot().launch_stage == LaunchStage.AWAITING_LAUNCH_DESTINATION

        land = ctrl.submit(LaunchDestinationIntent((4, 0)))
        assert land.ok
        assert land.destroyed == ((4, 0),)
        assert land.turn_ended
        assert ctrl.registry[(4, 0)].piece_type == PieceType.RUBY
        assert ctrl.registry[(4, 0)].owner == C
        assert ctrl.current_player == S

    def test_destination_before_source(self) -> None:
        ctrl = self._triggered()
        outcome = ctrl.submit(LaunchDestinationIntent((3, 0)))
        assert isinstance(outcome.error, WrongPhase)

    def test_not_launchable(self) -> None:
        ctrl = self._triggered()
        outcome = ctrl.submit(LaunchSelectIntent((0, 0)))
        assert isinstance(outcome.error, IllegalTarget)

    def test_bad_landing(self) -> None:
        ctrl = self._triggered()
        ctrl.submit(LaunchSelectIntent((2, 0)))
        outcome = ctrl.submit(LaunchDestinationIntent((6, 0)))
        assert isinstance(outcome.error, IllegalTarget)
        assert ctrl.registry[(2, 0)] is not None

    def test_confirm_intent_cannot_launch(self) -> None:
        ctrl = self._triggered()
        outcome = ctrl.submit(AbilityConfirmIntent(AbilityKind.LAUNCH))
        assert isinstance(outcome.error, WrongPhase)

    def test_primary_launch(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.JADE, (0, 0)),
            (C, PieceType.JADE, (1, 0)),
            (C, PieceType.RUBY, (2, 0)),
            (S, PieceType.AMBER, (0, -10)),
        )
        select = ctrl.submit(LaunchSelectIntent((2, 0)))
        assert select.destinations == {(3, 0), (4, 0), (5, 0), (6, 0)}
        blocked = ctrl.submit(MoveIntent((-1, 0), source=(0, 0)))
        assert isinstance(blocked.error, WrongPhase)

        land = ctrl.submit(LaunchDestinationIntent((5, 0)))
        assert land.ok
        assert land.turn_ended
        assert ctrl.registry[(5, 0)].piece_type == PieceType.RUBY
        assert ctrl.history[-1].action == "launch"

    def test_primary_launch_can_be_abandoned(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.JADE, (0, 0)),
            (C, PieceType.JADE, (1, 0)),
            (C, PieceType.RUBY, (2, 0)),
            (S, PieceType.AMBER, (0, -10)),
        )
        ctrl.submit(LaunchSelectIntent((2, 0)))
        ctrl.submit(DeselectIntent())
        assert ctrl.snapshot().launch_stage == LaunchStage.NONE
        assert ctrl.submit(MoveIntent((-1, 0), source=(0, 0))).ok

    def test_no_formation(self, started: TurnController) -> None:
        outcome = started.submit(LaunchSelectIntent((1, -5)))
        assert isinstance(outcome.error, WrongPhase)

    def test_step_two_launch_runs_attack_resolution(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.JADE, (0, 0)),
            (C, PieceType.JADE, (2, 1)),
            (C, PieceType.RUBY, (2, 0)),
            (S, PieceType.PEARL, (5, 1)),
            (S, PieceType.AMBER, (0, -10)),
            config=GameConfig(capture_policy=AdjacentCombat()),
        )
        assert ctrl.submit(MoveIntent((1, 0), source=(2, 1))).pending == (AbilityKind.LAUNCH,)
        ctrl.submit(LaunchSelectIntent((2, 0)))
        land = ctrl.submit(LaunchDestinationIntent((4, 0)))
        assert land.ok
        assert land.destroyed == ((5, 1),)
        assert ctrl.registry[(5, 1)] is None
        assert ctrl.history[-1].destroyed == ((5, 1),)

    def test_clicking_empty_space_mid_launch(self) -> None:
        ctrl = self._triggered()
        assert ctrl.submit(SelectIntent((3, 0))).ok
        assert ctrl.submit(SelectIntent((20, 20))).ok
        assert ctrl.snapshot().launch_stage == LaunchStage.AWAITING_LAUNCH_SOURCE
        outcome = ctrl.submit(SelectIntent((0, 0)))
        assert isinstance(outcome.error, WrongPhase)


# ── Swap ─────────────────────────────────────────────────────────────────────


class TestSwap:
    def _make_swap(self, config: GameConfig) -> TurnController:
        return _make_controller(
            (C, PieceType.PORTAL, (6, 6)),
            (S, PieceType.RUBY, (0, 0)),
            (S, PieceType.RUBY, (6, 2)),
            (C, PieceType.AMBER, (6, 0)),
            (C, PieceType.JADE, (7, 7)),
            config=config,
        )

    def test_enemy_partner_attacks_and_reports_formations(self) -> None:
        ctrl = self._make_swap(
            GameConfig(capture_policy=AdjacentCombat(), report_partner_abilities=True)
        )
        offered: list[tuple[Player, set[AbilityKind]]] = []
        ctrl.events.on_abilities_available.append(lambda p, pend: offered.append((p, set(pend))))

        outcome = ctrl.submit(SwapIntent((0, 0), source=(6, 6)))

        assert outcome.ok
        assert outcome.destroyed == ((7, 7),)
        assert outcome.turn_ended
        assert outcome.partner_pending == (AbilityKind.FIREBALL,)
        assert offered == [(S, {AbilityKind.FIREBALL})]
        assert ctrl.registry[(6, 0)] is not None
        assert ctrl.current_player == S

    def test_enemy_partner_formations_ignored_by_default(self) -> None:
        ctrl = self._make_swap(GameConfig(capture_policy=AdjacentCombat()))
        outcome = ctrl.submit(SwapIntent((0, 0), source=(6, 6)))
        assert outcome.ok
        assert outcome.destroyed == ((7, 7),)
        assert outcome.partner_pending == ()
        assert ctrl.registry[(6, 6)].owner == S


# ── Reset turn ───────────────────────────────────────────────────────────────


class TestResetTurn:
    def test_restores_turn_start(self) -> None:
        ctrl = _fireball_position()
        before = ctrl.registry.snapshot()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(ResetTurnIntent())
        assert outcome.ok
        assert ctrl.registry.snapshot() == before
        assert ctrl.step == TurnStep.AWAITING_ACTION
        assert ctrl.pending == {}
        assert ctrl.current_player == C
        assert ctrl.history == []

    def test_move_again_after_reset(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        ctrl.submit(ResetTurnIntent())
        assert ctrl.submit(MoveIntent((2, 2), source=(2, 1))).ok

    def test_only_current_turn(self, started: TurnController) -> None:
        assert started.submit(MoveIntent((1, -4), source=(1, -5))).ok
        assert started.submit(MoveIntent((1, 4), source=(1, 5))).ok
        after_second = started.registry.snapshot()
        started.submit(ResetTurnIntent())
        assert started.registry.snapshot() == after_second
        assert started.current_player == S
        assert len(started.history) == 16 + 2

    def test_not_during_setup(self) -> None:
        ctrl = TurnController()
        outcome = ctrl.submit(ResetTurnIntent())
        assert isinstance(outcome.error, WrongPhase)


# ── Victory ──────────────────────────────────────────────────────────────────


class TestVictory:
    def test_objective(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.RUBY, (0, -11)),
            (S, PieceType.AMBER, (5, 5)),
        )
        results: list[WinResult] = []
        ctrl.events.on_game_over.append(results.append)
        outcome = ctrl.submit(MoveIntent((0, -12), source=(0, -11)))
        assert outcome.win == WinResult(C, VictoryType.OBJECTIVE)
        assert ctrl.phase == GamePhase.GAME_OVER
        assert results == [WinResult(C, VictoryType.OBJECTIVE)]
        assert ctrl.snapshot().winner == C

    def test_elimination(self) -> None:
        ctrl = _fireball_position(spare=False)
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        outcome = ctrl.submit(AbilityConfirmIntent(AbilityKind.FIREBALL))
        assert outcome.win == WinResult(C, VictoryType.ELIMINATION)
        assert ctrl.result == outcome.win

    def test_no_win_mid_turn(self) -> None:
        ctrl = _fireball_position(spare=False)
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        assert ctrl.result is None
        assert ctrl.phase == GamePhase.GAMEPLAY

    def test_intents_rejected_after_game_over(self) -> None:
        ctrl = _make_controller(
            (C, PieceType.RUBY, (0, -11)),
            (S, PieceType.AMBER, (5, 5)),
        )
        ctrl.submit(MoveIntent((0, -12), source=(0, -11)))
        outcome = ctrl.submit(MoveIntent((4, 4), source=(5, 5)))
        assert isinstance(outcome.error, WrongPhase)


class TestHistory:
    def test_records_actions(self) -> None:
        ctrl = _fireball_position()
        ctrl.submit(MoveIntent((2, 0), source=(2, 1)))
        ctrl.submit(AbilityConfirmIntent(AbilityKind.FIREBALL))
        actions = [(r.action, r.ability) for r in ctrl.history]
        assert actions == [("move", None), ("ability", AbilityKind.FIREBALL)]
        assert ctrl.history[-1].destroyed == ((5, 0),)
