"""
TicTacToe Game Engine
=====================
Core rules and computer opponent for 3x3 TicTacToe.
Handles the board, win/draw detection, turn order, and AI strategies.

Presentation layers drive a GameSession and listen for its events.
"""

from .board import Board, Mark, BOARD_CELLS
from .errors import TicTacToeError, InvalidMoveError, NoLegalMoveError, OutOfRangeError
from .win_detector import WinDetector
from .move_generator import MoveGenerator, ValidationResult
from .ai_player import (
    Difficulty,
    AIStrategy,
    RandomStrategy,
    HeuristicStrategy,
    MinimaxStrategy,
    create_strategy,
)
from .game_state import (
    ControlMode,
    GameListener,
    GameSession,
    GameStatus,
    MoveResult,
    Player,
    PlayerSlot,
    SessionState,
)
from .scheduler import Scheduler, ImmediateScheduler, DelayedScheduler, TimerScheduler
from .config import GameConfig

__version__ = "1.0.0"
