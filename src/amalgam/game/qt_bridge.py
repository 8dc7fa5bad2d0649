"""Qt bridge that re-emits controller callbacks as signals.

Presentation layers built on Qt connect to these signals instead of
registering plain callbacks.  Everything runs on the caller's thread.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from amalgam.core.abilities import PendingAbility
from amalgam.core.enums import AbilityKind, Player
from amalgam.core.rules import WinResult
from amalgam.game.controller import ActionOutcome, TurnController
from amalgam.game.interfaces import GamePhase
from amalgam.game.state import GameStateSnapshot


class SessionBridge(QObject):
    """Signal adapter around a :class:`TurnController`."""

    state_changed = pyqtSignal(object)  # GameStateSnapshot
    abilities_available = pyqtSignal(int, object)  # player, {kind: pending}
    phase_changed = pyqtSignal(int)  # GamePhase
    game_over = pyqtSignal(int, int)  # winner, victory type
    intent_rejected = pyqtSignal(str, str)  # error code, message

    def __init__(
        self,
        controller: TurnController | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller or TurnController()
        events = self._controller.events
        events.on_state_changed.append(self._on_state)
        events.on_abilities_available.append(self._on_abilities)
        events.on_phase_changed.append(self._on_phase)
        events.on_game_over.append(self._on_game_over)

    @property
    def controller(self) -> TurnController:
        return self._controller

    @pyqtSlot(object, result=object)
    def submit(self, intent: object) -> ActionOutcome:
        """Forward *intent* and report a rejection as a signal."""
        outcome = self._controller.submit(intent)  # type: ignore[arg-type]
        if not outcome.ok and outcome.error is not None:
            self.intent_rejected.emit(outcome.error.code, str(outcome.error))
        return outcome

    @pyqtSlot()
    def new_game(self) -> None:
        self._controller.new_game()

    # ── Controller callbacks ─────────────────────────────────────────────

    def _on_state(self, snapshot: GameStateSnapshot) -> None:
        self.state_changed.emit(snapshot)

    def _on_abilities(
        self, player: Player, pending: dict[AbilityKind, PendingAbility]
    ) -> None:
        self.abilities_available.emit(int(player), pending)

    def _on_phase(self, phase: GamePhase) -> None:
        self.phase_changed.emit(int(phase))

    def _on_game_over(self, result: WinResult) -> None:
        self.game_over.emit(int(result.winner), int(result.victory_type))
