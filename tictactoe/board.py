"""
Board model for the TicTacToe engine.
Holds the nine cells and the marks that can be placed in them.
"""

from enum import Enum
from typing import Iterable, Iterator, List, Tuple

from .errors import OutOfRangeError


# Cells are numbered 0-8 in row-major order:
#   0 | 1 | 2
#   3 | 4 | 5
#   6 | 7 | 8
BOARD_CELLS = 9

_EMPTY_SYMBOLS = ("", "_", ".", " ", "-")


class Mark(Enum):
    """The content of a cell."""
    EMPTY = ""
    X = "X"
    O = "O"

    def opponent(self) -> "Mark":
        """Get the opposite playing mark."""
        if self is Mark.EMPTY:
            raise ValueError("EMPTY has no opponent")
        return Mark.O if self is Mark.X else Mark.X

    @property
    def symbol(self) -> str:
        """Single character used when printing a board."""
        return self.value or "_"

    @classmethod
    def from_symbol(cls, text: str) -> "Mark":
        """
        Parse a mark from its printed form.

        Args:
            text: "X", "O" (any case), or one of "", "_", ".", " ", "-" for empty.

        Returns:
            The matching Mark.
        """
        cleaned = text.strip().upper() if text.strip() else text
        if cleaned in _EMPTY_SYMBOLS:
            return cls.EMPTY
        try:
            return cls(cleaned)
        except ValueError:
            raise ValueError(f"Unknown mark symbol: {text!r}") from None


class Board:
    """
    The 3x3 TicTacToe board.

    Pure data: exactly one mark per cell, no game rules.
    """

    def __init__(self):
        self._cells: List[Mark] = [Mark.EMPTY] * BOARD_CELLS

    @classmethod
    def from_marks(cls, marks: Iterable[Mark]) -> "Board":
        """Build a board from nine marks in row-major order."""
        cells = list(marks)
        if len(cells) != BOARD_CELLS:
            raise ValueError(f"A board needs {BOARD_CELLS} cells, got {len(cells)}")
        board = cls()
        for index, mark in enumerate(cells):
            board.set(index, mark)
        return board

    @classmethod
    def from_string(cls, layout: str) -> "Board":
        """
        Build a board from a compact string such as "XO_X_O___".

        Whitespace and "|" separators are ignored, so "XO_|X_O|___" works too.
        """
        symbols = [ch for ch in layout if ch not in " |\n\t"]
        return cls.from_marks(Mark.from_symbol(ch) for ch in symbols)

    def _check_index(self, index: int):
        # bool is an int subclass, but True/False are never cell numbers
        if not isinstance(index, int) or isinstance(index, bool):
            raise OutOfRangeError(f"Cell index must be an integer, got {index!r}")
        if not 0 <= index < BOARD_CELLS:
            raise OutOfRangeError(f"Invalid cell {index}. Must be 0-{BOARD_CELLS - 1}.")

    def get(self, index: int) -> Mark:
        """Get the mark in a cell."""
        self._check_index(index)
        return self._cells[index]

    def set(self, index: int, mark: Mark):
        """
        Put a mark in a cell (Mark.EMPTY clears it).

        Args:
            index: Cell number (0-8).
            mark: The mark to place.
        """
        self._check_index(index)
        if not isinstance(mark, Mark):
            raise ValueError(f"Expected a Mark, got {mark!r}")
        self._cells[index] = mark

    def is_full(self) -> bool:
        """True when no cell is empty."""
        return Mark.EMPTY not in self._cells

    def clear(self):
        """Empty every cell."""
        for index in range(BOARD_CELLS):
            self._cells[index] = Mark.EMPTY

    def empty_indices(self) -> List[int]:
        return [i for i, mark in enumerate(self._cells) if mark is Mark.EMPTY]

    def occupied_count(self) -> int:
        return BOARD_CELLS - self._cells.count(Mark.EMPTY)

    def snapshot(self) -> Tuple[Mark, ...]:
        """Read-only view of the nine cells."""
        return tuple(self._cells)

    def copy(self) -> "Board":
        """Create an independent copy of the board."""
        board = Board()
        board._cells = list(self._cells)
        return board

    def __iter__(self) -> Iterator[Mark]:
        return iter(self._cells)

    def __len__(self) -> int:
        return BOARD_CELLS

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Board({''.join(mark.symbol for mark in self._cells)!r})"
