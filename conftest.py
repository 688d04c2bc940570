"""
Shared pytest fixtures for the TicTacToe tests.
"""

import random

import pytest

from tictactoe import (
    Board,
    ControlMode,
    Difficulty,
    GameSession,
    Mark,
    Player,
    Scheduler,
    WinDetector,
)


class ManualScheduler(Scheduler):
    """Keeps callbacks until the test runs them."""

    def __init__(self):
        self.pending = []

    def enqueue(self, delay, callback):
        self.pending.append((delay, callback))

    def run_pending(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class RecordingListener:
    """Collects every session event as a tuple."""

    def __init__(self):
        self.events = []

    def on_cell_updated(self, index, mark):
        self.events.append(("cell", index, mark))

    def on_turn_changed(self, mark):
        self.events.append(("turn", mark))

    def on_game_ended(self, state, winner_label):
        self.events.append(("end", state.status, winner_label))

    def on_restart(self, state):
        self.events.append(("restart", state.turn))


def reachable_boards():
    """Every distinct board that can occur in a real game, X moving first."""
    detector = WinDetector()
    seen = set()
    stack = [(Board(), Mark.X)]
    while stack:
        board, mark = stack.pop()
        key = board.snapshot()
        if key in seen:
            continue
        seen.add(key)
        yield board
        if detector.is_terminal(board):
            continue
        for index in board.empty_indices():
            child = board.copy()
            child.set(index, mark)
            stack.append((child, mark.opponent()))


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def two_humans():
    """Session where both players are human and X starts."""
    return GameSession(
        player_one=Player("Alice", Mark.X),
        player_two=Player("Bob", Mark.O),
        starting_mark=Mark.X,
    )


@pytest.fixture
def make_ai_session():
    """Build a human (X) vs AI (O) session."""

    def _make(difficulty=Difficulty.HARD, starting_mark=Mark.X, seed=0, **kwargs):
        return GameSession(
            player_one=Player("Alice", Mark.X),
            player_two=Player("Robot", Mark.O, ControlMode.AI, difficulty),
            starting_mark=starting_mark,
            rng=random.Random(seed),
            **kwargs
        )

    return _make


@pytest.fixture(scope="session")
def all_reachable_boards():
    return list(reachable_boards())
