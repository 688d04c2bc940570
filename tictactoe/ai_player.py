"""
AI players for the TicTacToe engine.
Three strengths: random moves, one-ply win/block tactics, and minimax.
"""

import logging
import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional, Tuple

from .board import Board, Mark
from .errors import NoLegalMoveError
from .move_generator import MoveGenerator
from .win_detector import WinDetector


logger = logging.getLogger(__name__)


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = 1      # Random moves
    MEDIUM = 2    # Win if possible, otherwise block, otherwise random
    HARD = 3      # Full minimax


class AIStrategy(ABC):
    """
    Base class for computer opponents.

    A strategy only picks a cell. It may place marks on the board while
    thinking but always puts the board back the way it found it.
    """

    def __init__(self):
        self.move_generator = MoveGenerator()
        self.win_detector = WinDetector()

    def choose_move(self, board: Board, ai_mark: Mark, opponent_mark: Mark) -> int:
        """
        Pick the cell to play.

        Args:
            board: Current board.
            ai_mark: The mark the AI plays.
            opponent_mark: The mark of the other player.

        Returns:
            Cell index (0-8).

        Raises:
            NoLegalMoveError: If the board is full.
        """
        moves = self.move_generator.legal_moves(board)
        if not moves:
            raise NoLegalMoveError("No empty cell left for the AI to play")
        return self._select(board, moves, ai_mark, opponent_mark)

    @abstractmethod
    def _select(self, board: Board, moves, ai_mark: Mark, opponent_mark: Mark) -> int:
        ...


class RandomStrategy(AIStrategy):
    """Plays a uniformly random empty cell."""

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__()
        self.rng = rng or random.Random()

    def _select(self, board, moves, ai_mark, opponent_mark):
        return self.rng.choice(moves)


class HeuristicStrategy(AIStrategy):
    """
    One-ply tactics.

    1. Take a cell that completes a line for the AI
    2. Otherwise take a cell that would complete a line for the opponent
    3. Otherwise play randomly
    """

    def __init__(self, rng: Optional[random.Random] = None):
        super().__init__()
        self.fallback = RandomStrategy(rng)

    def _select(self, board, moves, ai_mark, opponent_mark):
        for index in moves:
            if self._completes_line(board, index, ai_mark):
                logger.debug("Heuristic AI wins at %d", index)
                return index

        for index in moves:
            if self._completes_line(board, index, opponent_mark):
                logger.debug("Heuristic AI blocks at %d", index)
                return index

        return self.fallback.choose_move(board, ai_mark, opponent_mark)

    def _completes_line(self, board: Board, index: int, mark: Mark) -> bool:
        board.set(index, mark)
        try:
            return self.win_detector.has_win(board, mark)
        finally:
            board.set(index, Mark.EMPTY)


class MinimaxStrategy(AIStrategy):
    """
    An AI that plays TicTacToe using the Minimax algorithm.

    The AI will always play optimally - it will win if possible,
    block the opponent if needed, and never lose (at worst, draw).

    Scores are seen from the AI's side: a win found `depth` plies after the
    candidate move is worth WIN_SCORE - depth, a loss depth - WIN_SCORE,
    a draw 0. Equal scores go to the lowest cell index.
    """

    WIN_SCORE = 10

    def __init__(self, use_pruning: bool = True, win_score: Optional[int] = None):
        """
        Initialize the minimax player.

        Args:
            use_pruning: Use alpha-beta pruning. The chosen move and the root
                score are the same either way, pruning only visits fewer nodes.
            win_score: Override WIN_SCORE.
        """
        super().__init__()
        self.use_pruning = use_pruning
        if win_score is not None:
            self.WIN_SCORE = win_score

        # Keep track of how many positions we've evaluated (for debugging)
        self.nodes_evaluated = 0

    def _select(self, board, moves, ai_mark, opponent_mark):
        move, _ = self._search_root(board, moves, ai_mark, opponent_mark)
        return move

    def evaluate(self, board: Board, ai_mark: Mark, opponent_mark: Mark) -> int:
        """
        Get the minimax score of the position with the AI to move.

        Raises:
            NoLegalMoveError: If the board is full.
        """
        moves = self.move_generator.legal_moves(board)
        if not moves:
            raise NoLegalMoveError("No empty cell left to evaluate")
        _, score = self._search_root(board, moves, ai_mark, opponent_mark)
        return score

    def score_moves(self, board: Board, ai_mark: Mark, opponent_mark: Mark) -> Dict[int, int]:
        """
        Get the exact score of every legal move.

        Returns:
            Mapping of cell index to score, in ascending cell order.
        """
        self.nodes_evaluated = 0
        scores = {}
        for index in self.move_generator.legal_moves(board):
            scores[index] = self._score_candidate(
                board, index, ai_mark, opponent_mark, float('-inf')
            )
        return scores

    def _search_root(self, board, moves, ai_mark, opponent_mark) -> Tuple[int, int]:
        self.nodes_evaluated = 0

        best_score = float('-inf')
        best_move = moves[0]

        for index in moves:
            score = self._score_candidate(board, index, ai_mark, opponent_mark, best_score)
            # Strictly greater: on ties the first (lowest) cell wins
            if score > best_score:
                best_score = score
                best_move = index

        logger.debug(
            "Minimax evaluated %d positions. Best move: %d (score: %d)",
            self.nodes_evaluated, best_move, best_score
        )
        return best_move, best_score

    def _score_candidate(self, board, index, ai_mark, opponent_mark, alpha) -> int:
        # A pruned candidate can only come back <= alpha, so it never beats
        # the move already holding alpha
        if not self.use_pruning:
            alpha = float('-inf')

        board.set(index, ai_mark)
        try:
            return self._minimax(
                board, 0, False, ai_mark, opponent_mark, alpha, float('inf')
            )
        finally:
            board.set(index, Mark.EMPTY)

    def _minimax(
        self,
        board: Board,
        depth: int,
        is_maximizing: bool,
        ai_mark: Mark,
        opponent_mark: Mark,
        alpha: float,
        beta: float
    ) -> int:
        """
        Minimax algorithm with optional alpha-beta pruning.

        Args:
            board: Board to evaluate (restored before returning).
            depth: Plies played since the candidate move.
            is_maximizing: True if it is the AI's simulated turn.
            ai_mark: The AI's mark.
            opponent_mark: The opponent's mark.
            alpha: Alpha value for pruning.
            beta: Beta value for pruning.

        Returns:
            The score of the position.
        """
        self.nodes_evaluated += 1

        # Check terminal states
        if self.win_detector.has_win(board, ai_mark):
            return self.WIN_SCORE - depth
        if self.win_detector.has_win(board, opponent_mark):
            return depth - self.WIN_SCORE
        if board.is_full():
            return 0

        mark = ai_mark if is_maximizing else opponent_mark
        best_score = float('-inf') if is_maximizing else float('inf')

        for index in self.move_generator.legal_moves(board):
            board.set(index, mark)
            try:
                score = self._minimax(
                    board, depth + 1, not is_maximizing,
                    ai_mark, opponent_mark, alpha, beta
                )
            finally:
                board.set(index, Mark.EMPTY)

            if is_maximizing:
                best_score = max(best_score, score)
                alpha = max(alpha, score)
            else:
                best_score = min(best_score, score)
                beta = min(beta, score)

            if self.use_pruning and beta <= alpha:
                break  # Prune

        return best_score


def create_strategy(difficulty: Difficulty, rng: Optional[random.Random] = None) -> AIStrategy:
    """
    Build the strategy for a difficulty level.

    Args:
        difficulty: EASY, MEDIUM or HARD.
        rng: Random source for the strategies that need one.
    """
    if difficulty is Difficulty.EASY:
        return RandomStrategy(rng)
    if difficulty is Difficulty.MEDIUM:
        return HeuristicStrategy(rng)
    if difficulty is Difficulty.HARD:
        return MinimaxStrategy()
    raise ValueError(f"Unknown difficulty: {difficulty!r}")
