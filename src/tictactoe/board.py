"""Board engine: square occupancy, line tallies, cursors, and win detection.

Every row, column, and main diagonal keeps a running ``LineState`` tally of
the O and X marks placed on it. ``Board.set_state`` updates the tallies as
marks land, so ``Board.find_winner`` checks each line in constant time
instead of rescanning its cells.

Cursors never hold references into the tally arrays. A ``LineCursor`` is a
``(board, series, index)`` handle and a ``CellCursor`` is a
``(board, row, column)`` handle plus direction flags; both read through the
board on every query, so they stay valid while moves are placed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .types import Coord, LineIdentifier, MoveType

logger = logging.getLogger(__name__)

SERIES_ROWS = "rows"
SERIES_COLUMNS = "columns"
SERIES_DIAGONALS = "diagonals"

DIAGONAL_ULBR = 0
DIAGONAL_URBL = 1


class Cell:
    """A single square. Once it holds O or X it never changes again."""

    __slots__ = ("state",)

    def __init__(self) -> None:
        self.state = MoveType.EMPTY

    def is_empty(self) -> bool:
        return self.state is MoveType.EMPTY

    def set_state(self, new_state: MoveType) -> bool:
        if not self.is_empty():
            return False
        self.state = new_state
        return True


@dataclass
class LineState:
    """Running tally of the marks placed on one line of ``side`` cells."""

    side: int
    o_filled: int = 0
    x_filled: int = 0

    @property
    def filled(self) -> int:
        return self.o_filled + self.x_filled

    def is_captured(self) -> bool:
        return self.o_filled == self.side or self.x_filled == self.side

    def is_pure(self) -> bool:
        """Whether marks from at most one side are present."""

        return self.o_filled == 0 or self.x_filled == 0

    def filled_for(self, side: MoveType) -> int:
        if side is MoveType.O:
            return self.o_filled
        if side is MoveType.X:
            return self.x_filled
        raise ValueError("EMPTY is not a playing side")

    def fill_as(self, new_state: MoveType) -> None:
        if new_state is MoveType.O:
            self.o_filled += 1
        elif new_state is MoveType.X:
            self.x_filled += 1


class LineCursor:
    """Read-only cursor over one series of lines (rows, columns, or diagonals).

    The cursor can step forwards and backwards through the series or jump to
    an index, and answers tally queries about the line it stands on.
    """

    def __init__(self, board: "Board", series: str, index: int = 0) -> None:
        self._board = board
        self.series = series
        self._index = 0
        self.set_line_index(index)

    def _state(self) -> LineState:
        return self._board._series(self.series)[self._index]

    @property
    def line_index(self) -> int:
        return self._index

    @property
    def line_count(self) -> int:
        return len(self._board._series(self.series))

    @property
    def identifier(self) -> LineIdentifier:
        """The ``LineIdentifier`` of the line under the cursor."""

        if self.series == SERIES_ROWS:
            return LineIdentifier.ROW
        if self.series == SERIES_COLUMNS:
            return LineIdentifier.COLUMN
        if self._index == DIAGONAL_ULBR:
            return LineIdentifier.DIAGONAL_ULBR
        return LineIdentifier.DIAGONAL_URBL

    def set_line_index(self, new_index: int) -> None:
        if not 0 <= new_index < self.line_count:
            raise ValueError(f"Line index {new_index} out of bounds for {self.series}")
        self._index = new_index

    def next(self) -> bool:
        """Move to the next line; False if already on the last one."""

        if self._index == self.line_count - 1:
            return False
        self._index += 1
        return True

    def last(self) -> bool:
        """Move to the previous line; False if already on the first one."""

        if self._index == 0:
            return False
        self._index -= 1
        return True

    @property
    def o_filled(self) -> int:
        return self._state().o_filled

    @property
    def x_filled(self) -> int:
        return self._state().x_filled

    def filled(self) -> int:
        return self._state().filled

    def filled_for(self, side: MoveType) -> int:
        return self._state().filled_for(side)

    def is_line_dirty(self, observer: MoveType) -> bool:
        """Whether the line holds any mark of ``observer``'s opponent."""

        if observer is MoveType.O:
            return self.x_filled > 0
        if observer is MoveType.X:
            return self.o_filled > 0
        return False

    def is_pure(self) -> bool:
        return self._state().is_pure()

    def is_captured(self) -> bool:
        return self._state().is_captured()

    def line_size(self) -> int:
        return self._board.side


class CellCursor:
    """Cursor walking individual squares along a row, column, or diagonal.

    ``fix_row`` keeps the row constant (walk along a row) and ``fix_column``
    keeps the column constant (walk down a column); at most one of them is
    set. With neither set the cursor moves diagonally, and ``negate_row`` /
    ``negate_column`` make ``next()`` step backwards on that axis. Stepping
    down-right follows the ULBR diagonal; ``negate_column=True`` follows the
    URBL diagonal from the top-right corner.
    """

    def __init__(
        self,
        board: "Board",
        row: int = 0,
        column: int = 0,
        fix_row: bool = False,
        fix_column: bool = False,
        negate_row: bool = False,
        negate_column: bool = False,
    ) -> None:
        if not board.in_bounds(row, column):
            raise ValueError(f"({row}, {column}) out of bounds for {board.side}x{board.side} board")
        if fix_row and fix_column:
            raise ValueError("fix_row and fix_column cannot both be set")
        self._board = board
        self.row = row
        self.column = column
        self.fix_row = fix_row
        self.fix_column = fix_column
        self.negate_row = negate_row
        self.negate_column = negate_column

    def set_fix_row(self, fix_row: bool) -> bool:
        """Set ``fix_row``; returns True if ``fix_column`` had to be cleared."""

        self.fix_row = fix_row
        if fix_row and self.fix_column:
            self.fix_column = False
            return True
        return False

    def set_fix_column(self, fix_column: bool) -> bool:
        """Set ``fix_column``; returns True if ``fix_row`` had to be cleared."""

        self.fix_column = fix_column
        if fix_column and self.fix_row:
            self.fix_row = False
            return True
        return False

    def set_row(self, row: int) -> None:
        if 0 <= row < self._board.side:
            self.row = row

    def set_column(self, column: int) -> None:
        if 0 <= column < self._board.side:
            self.column = column

    @property
    def position(self) -> Coord:
        return self.row, self.column

    def state(self) -> MoveType:
        return self._board.get_state(self.row, self.column)

    def _shift(self, value: int, backwards: bool) -> Optional[int]:
        if backwards:
            return value - 1 if value > 0 else None
        return value + 1 if value < self._board.side - 1 else None

    def step(self, negate_row: bool = False, negate_column: bool = False) -> int:
        """Step to an adjacent square.

        Returns how many free axes could not move without leaving the board
        (0, 1, or 2). Fixed axes never count as failures.
        """

        failures = 0
        if not self.fix_row:
            shifted = self._shift(self.row, negate_row)
            if shifted is None:
                failures += 1
            else:
                self.row = shifted
        if not self.fix_column:
            shifted = self._shift(self.column, negate_column)
            if shifted is None:
                failures += 1
            else:
                self.column = shifted
        return failures

    def next(self) -> int:
        return self.step(self.negate_row, self.negate_column)

    def closest_empty(self) -> "CellCursor":
        """Advance until an EMPTY square is found or the line runs out.

        When the rest of the line is full the cursor is left on its last
        square, so callers should check ``state()`` when that matters.
        """

        while self.state() is not MoveType.EMPTY:
            if self.next() != 0:
                break
        return self


class Board:
    """Holds the grid and is the only authority on occupancy and wins."""

    def __init__(self, side: int) -> None:
        if side < 1:
            raise ValueError("Board side must be at least 1")
        self.side = side
        self.dirty_count = 0
        self.hotspot: Coord = (0, 0)
        self.next_state = MoveType.O
        self._grid: List[List[Cell]] = [[Cell() for _ in range(side)] for _ in range(side)]
        self._rows = [LineState(side) for _ in range(side)]
        self._columns = [LineState(side) for _ in range(side)]
        self._diagonals = [LineState(side) for _ in range(2)]
        self.win_cache_index = 0
        self.win_cache_identifier: Optional[LineIdentifier] = None

    def _series(self, series: str) -> List[LineState]:
        if series == SERIES_ROWS:
            return self._rows
        if series == SERIES_COLUMNS:
            return self._columns
        if series == SERIES_DIAGONALS:
            return self._diagonals
        raise ValueError(f"Unknown line series '{series}'")

    @property
    def area(self) -> int:
        return self.side * self.side

    @property
    def empty_area(self) -> int:
        return self.area - self.dirty_count

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.side and 0 <= column < self.side

    def _check_bounds(self, row: int, column: int) -> None:
        if not self.in_bounds(row, column):
            raise ValueError(f"({row}, {column}) out of bounds for {self.side}x{self.side} board")

    def get_state(self, row: int, column: int) -> MoveType:
        self._check_bounds(row, column)
        return self._grid[row][column].state

    def line_state(self, series: str, index: int) -> LineState:
        """Return a copy of one line's tally."""

        state = self._series(series)[index]
        return LineState(side=state.side, o_filled=state.o_filled, x_filled=state.x_filled)

    def set_state(self, new_state: MoveType, row: int, column: int) -> bool:
        """Place ``new_state`` on a square.

        Returns False, leaving the board untouched, if the square already
        holds a mark. Writing EMPTY never changes anything; it only reports
        whether the square is still empty.
        """

        self._check_bounds(row, column)
        cell = self._grid[row][column]
        if new_state is MoveType.EMPTY:
            return cell.is_empty()
        if not cell.set_state(new_state):
            logger.warning(
                "The (%d, %d) square could not be set to %s, it already holds %s",
                row,
                column,
                new_state,
                cell.state,
            )
            return False

        self.dirty_count += 1
        self.hotspot = (row, column)
        self.next_state = new_state.opponent()

        self._rows[row].fill_as(new_state)
        self._columns[column].fill_as(new_state)
        if row == column:
            self._diagonals[DIAGONAL_ULBR].fill_as(new_state)
        if row + column == self.side - 1:
            self._diagonals[DIAGONAL_URBL].fill_as(new_state)
        return True

    def row_iterator(self, start: int = 0) -> LineCursor:
        return LineCursor(self, SERIES_ROWS, start)

    def column_iterator(self, start: int = 0) -> LineCursor:
        return LineCursor(self, SERIES_COLUMNS, start)

    def diagonal_iterator(self) -> LineCursor:
        """Cursor over the ULBR diagonal (index 0) then the URBL one (index 1)."""

        return LineCursor(self, SERIES_DIAGONALS)

    def find_winner(self) -> MoveType:
        """Return the side owning a fully filled line, or EMPTY.

        Rows are checked first, then columns, then the ULBR and URBL
        diagonals; the first captured line wins and is recorded in the win
        cache.
        """

        for cursor in (self.row_iterator(), self.column_iterator(), self.diagonal_iterator()):
            while True:
                if cursor.is_captured():
                    self.win_cache_index = cursor.line_index
                    self.win_cache_identifier = cursor.identifier
                    return MoveType.O if cursor.o_filled == self.side else MoveType.X
                if not cursor.next():
                    break
        return MoveType.EMPTY

    def winning_cells(self) -> List[Coord]:
        """Squares of the line recorded by the last successful ``find_winner``."""

        identifier = self.win_cache_identifier
        index = self.win_cache_index
        span = range(self.side)
        if identifier is LineIdentifier.ROW:
            return [(index, c) for c in span]
        if identifier is LineIdentifier.COLUMN:
            return [(r, index) for r in span]
        if identifier is LineIdentifier.DIAGONAL_ULBR:
            return [(i, i) for i in span]
        if identifier is LineIdentifier.DIAGONAL_URBL:
            return [(i, self.side - 1 - i) for i in span]
        return []
