"""
Exceptions raised by the TicTacToe engine.
All of them are local, recoverable conditions.
"""


class TicTacToeError(Exception):
    """Base class for every error raised by the engine."""


class InvalidMoveError(TicTacToeError, ValueError):
    """A move was rejected (game over, bad index, occupied cell, wrong turn)."""


class NoLegalMoveError(TicTacToeError):
    """An AI strategy was asked to move on a full board."""


class OutOfRangeError(TicTacToeError, IndexError):
    """A board index outside 0-8 was used."""
