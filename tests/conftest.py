"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

from amalgam.core.registry import PieceRegistry
from amalgam.core.topology import BoardTopology
from amalgam.game.controller import TurnController
from amalgam.game.intents import AutoSetupIntent

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for signal tests."""
    qtcore = pytest.importorskip("PyQt6.QtCore")

    app = qtcore.QCoreApplication.instance()
    if app is None:
        app = qtcore.QCoreApplication([])
    yield app


@pytest.fixture
def topology() -> BoardTopology:
    return BoardTopology.standard()


@pytest.fixture
def empty_registry(topology: BoardTopology) -> PieceRegistry:
    return PieceRegistry(topology)


@pytest.fixture
def started() -> TurnController:
    """Controller past setup with the default arrangement on the board."""
    ctrl = TurnController()
    outcome = ctrl.submit(AutoSetupIntent())
    assert outcome.ok
    return ctrl
