"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

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
    """Provide a singleton QCoreApplication for signal/thread tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def three_games() -> str:
    return """[Event "First"]
[Result "1-0"]

1. e4 e5 2. Nf3 {develops} Nc6 1-0

[Event "Second"]
[Result "*"]

1. d4 (1. c4 e5 2. Nc3 d5 *

[Event "Third"]
[Result "0-1"]

1. c4 e5 (1... c5 2. Nc3) 2. Nc3 $2 0-1
"""
