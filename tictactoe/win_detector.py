"""
Win detector for the TicTacToe engine.
Checks if a mark has completed a line or if the game is a draw.
"""

from typing import Optional, Tuple

from .board import Board, Mark


Line = Tuple[int, int, int]


class WinDetector:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 cells holding the same mark in a row
    (horizontally, vertically, or diagonally)
    """

    # All possible winning lines (as cell indices)
    WINNING_LINES: Tuple[Line, ...] = (
        # Rows
        (0, 1, 2),
        (3, 4, 5),
        (6, 7, 8),
        # Columns
        (0, 3, 6),
        (1, 4, 7),
        (2, 5, 8),
        # Diagonals
        (0, 4, 8),
        (2, 4, 6),
    )

    def has_win(self, board: Board, mark: Mark) -> bool:
        """
        Check if a mark owns a complete line.

        Args:
            board: The board to inspect.
            mark: X or O. Empty cells never form a win.

        Returns:
            True if any line is all `mark`.
        """
        return self.winning_line(board, mark) is not None

    def winning_line(self, board: Board, mark: Mark) -> Optional[Line]:
        """
        Get the first line completed by `mark`.

        Returns:
            The line as three cell indices, or None.
        """
        if mark is Mark.EMPTY:
            return None

        cells = board.snapshot()
        for line in self.WINNING_LINES:
            a, b, c = line
            if cells[a] is mark and cells[b] is mark and cells[c] is mark:
                return line
        return None

    def winner(self, board: Board) -> Optional[Mark]:
        """Get the mark that has a line, or None if nobody has one."""
        for mark in (Mark.X, Mark.O):
            if self.has_win(board, mark):
                return mark
        return None

    def is_draw(self, board: Board) -> bool:
        """
        Check if the game is a draw.

        A draw occurs when all cells are filled AND nobody has a line.
        """
        return (
            board.is_full()
            and not self.has_win(board, Mark.X)
            and not self.has_win(board, Mark.O)
        )

    def is_terminal(self, board: Board) -> bool:
        """True once someone has won or the board is full."""
        return board.is_full() or self.winner(board) is not None
