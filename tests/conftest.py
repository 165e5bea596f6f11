# tests/conftest.py

from __future__ import annotations

import pytest

from areaboard.api import ProjectBoard
from areaboard.manager import TaskManager
from areaboard.store import MemoryStore


class FakeClock:
    """
    Deterministic epoch-millis clock.

    Each call moves one second forward so identifiers and timestamps are
    strictly increasing and easy to reason about in assertions.
    """

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def board(store: MemoryStore, clock: FakeClock) -> ProjectBoard:
    board = ProjectBoard(store, clock=clock)
    board.initialize()
    return board


@pytest.fixture()
def manager(board: ProjectBoard) -> TaskManager:
    return board.tasks
