"""
Move generation and validation for the TicTacToe engine.
"""

from dataclasses import dataclass
from typing import List, Optional

from .board import Board, Mark, BOARD_CELLS


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveGenerator:
    """
    Lists and validates TicTacToe moves.

    Rules:
    1. Can only place on empty cells
    2. Cell must be 0-8
    3. Game must not be over
    """

    def legal_moves(self, board: Board) -> List[int]:
        """
        Get every empty cell.

        The order is always ascending; AI strategies rely on it to break ties
        in favour of the lowest index.
        """
        return [index for index in range(BOARD_CELLS) if board.get(index) is Mark.EMPTY]

    def validate_move(
        self,
        board: Board,
        index: int,
        is_game_over: bool = False
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            index: Cell to place a mark in (0-8).
            is_game_over: Whether the game has already ended.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        # Check if game is over
        if is_game_over:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        # Check if index is in valid range
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < BOARD_CELLS:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell {index!r}. Must be 0-{BOARD_CELLS - 1}."
            )

        # Check if cell is empty
        occupant = board.get(index)
        if occupant is not Mark.EMPTY:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {occupant.value}"
            )

        return ValidationResult(is_valid=True)
