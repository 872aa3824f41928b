"""Read-only analysis of a board from one side's point of view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .board import DIAGONAL_ULBR, DIAGONAL_URBL, Board, CellCursor, LineCursor
from .types import MoveType

MAX_CLEAN_LINES = 4


@dataclass(frozen=True)
class CellRelations:
    """How an empty square relates to the lines running through it.

    A line is clean when the observer's opponent has no mark on it.
    """

    row: int
    column: int
    row_clean: bool
    column_clean: bool
    diagonals_clean: int
    diagonals_count: int

    def total_clean(self) -> int:
        return int(self.row_clean) + int(self.column_clean) + self.diagonals_clean


class BoardAnalyzer:
    """Catalogue of the empty squares, bucketed by clean-line count (0..4)."""

    def __init__(self, board: Board, observer: MoveType) -> None:
        if observer is MoveType.EMPTY:
            raise ValueError("The observer cannot be EMPTY")
        self.board = board
        self.observer = observer
        self._table: List[List[CellRelations]] = [[] for _ in range(MAX_CLEAN_LINES + 1)]

    @classmethod
    def build(
        cls,
        board: Board,
        observer: MoveType,
        row_cursor: Optional[LineCursor] = None,
        column_cursor: Optional[LineCursor] = None,
        diagonal_cursor: Optional[LineCursor] = None,
    ) -> "BoardAnalyzer":
        """Analyze every empty square of ``board`` for ``observer``.

        The cursors are repositioned while scanning; fresh ones are created
        when not supplied.
        """

        analyzer = cls(board, observer)
        rows = row_cursor or board.row_iterator()
        columns = column_cursor or board.column_iterator()
        diagonals = diagonal_cursor or board.diagonal_iterator()
        last = board.side - 1

        for r in range(board.side):
            rows.set_line_index(r)
            for c in range(board.side):
                if board.get_state(r, c) is not MoveType.EMPTY:
                    continue
                columns.set_line_index(c)
                diagonals_count = 0
                diagonals_clean = 0
                if r == c:
                    diagonals.set_line_index(DIAGONAL_ULBR)
                    diagonals_count += 1
                    diagonals_clean += not diagonals.is_line_dirty(observer)
                if r + c == last:
                    diagonals.set_line_index(DIAGONAL_URBL)
                    diagonals_count += 1
                    diagonals_clean += not diagonals.is_line_dirty(observer)
                analyzer._add(
                    CellRelations(
                        row=r,
                        column=c,
                        row_clean=not rows.is_line_dirty(observer),
                        column_clean=not columns.is_line_dirty(observer),
                        diagonals_clean=diagonals_clean,
                        diagonals_count=diagonals_count,
                    )
                )
        return analyzer

    def _add(self, relations: CellRelations) -> None:
        self._table[relations.total_clean()].append(relations)

    def relations(self, total_clean: int) -> List[CellRelations]:
        if not 0 <= total_clean <= MAX_CLEAN_LINES:
            raise ValueError("total_clean must be between 0 and 4")
        return list(self._table[total_clean])

    def best_cells(self) -> List[CellRelations]:
        """Squares touching the most clean lines; empty on a full board."""

        for bucket in reversed(self._table):
            if bucket:
                return list(bucket)
        return []

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._table)

    @staticmethod
    def find_capturable_line(cursor: LineCursor, observer: MoveType) -> Optional[LineCursor]:
        """Advance ``cursor`` to the first line ``observer`` can win in one move.

        Such a line is clean for ``observer`` and has exactly one empty
        square left. The search starts at the cursor's current line. Returns
        None when the series runs out.
        """

        if observer is MoveType.EMPTY:
            raise ValueError("The observer cannot be EMPTY")
        while True:
            if not cursor.is_line_dirty(observer) and cursor.filled_for(observer) == cursor.line_size() - 1:
                return cursor
            if not cursor.next():
                return None

    @staticmethod
    def row_finder(row: int, board: Board) -> CellCursor:
        return CellCursor(board, row, 0, fix_row=True)

    @staticmethod
    def column_finder(column: int, board: Board) -> CellCursor:
        return CellCursor(board, 0, column, fix_column=True)

    @staticmethod
    def diagonal_finder(index: int, board: Board) -> CellCursor:
        """Cursor on the ULBR (0) or URBL (1) diagonal, starting at its top."""

        if index == DIAGONAL_ULBR:
            return CellCursor(board, 0, 0)
        if index == DIAGONAL_URBL:
            return CellCursor(board, 0, board.side - 1, negate_column=True)
        raise ValueError("Diagonal index must be 0 or 1")
