import pytest

from tictactoe.analyzer import BoardAnalyzer
from tictactoe.board import Board
from tictactoe.types import MoveType


def positions(relations):
    return sorted((rel.row, rel.column) for rel in relations)


def test_empty_board_buckets():
    board = Board(3)
    analyzer = BoardAnalyzer.build(board, MoveType.O)

    assert len(analyzer) == 9
    assert positions(analyzer.relations(4)) == [(1, 1)]
    assert positions(analyzer.relations(3)) == [(0, 0), (0, 2), (2, 0), (2, 2)]
    assert positions(analyzer.relations(2)) == [(0, 1), (1, 0), (1, 2), (2, 1)]
    assert analyzer.relations(1) == []
    assert positions(analyzer.best_cells()) == [(1, 1)]

    center = analyzer.relations(4)[0]
    assert center.diagonals_count == 2
    assert center.diagonals_clean == 2


def test_opponent_marks_lower_cleanliness():
    board = Board(3)
    board.set_state(MoveType.X, 1, 1)
    analyzer = BoardAnalyzer.build(
        board, MoveType.O, board.row_iterator(), board.column_iterator(), board.diagonal_iterator()
    )

    assert len(analyzer) == 8
    assert positions(analyzer.relations(2)) == [(0, 0), (0, 2), (2, 0), (2, 2)]
    assert positions(analyzer.relations(1)) == [(0, 1), (1, 0), (1, 2), (2, 1)]
    corner = analyzer.relations(2)[0]
    assert corner.diagonals_count == 1
    assert corner.diagonals_clean == 0


def test_own_marks_keep_lines_clean():
    board = Board(3)
    board.set_state(MoveType.O, 1, 1)
    analyzer = BoardAnalyzer.build(board, MoveType.O)
    assert positions(analyzer.relations(3)) == [(0, 0), (0, 2), (2, 0), (2, 2)]
    assert board.dirty_count == 1


def test_full_board_has_no_candidates():
    board = Board(3)
    for r in range(3):
        for c in range(3):
            board.set_state(board.next_state, r, c)
    analyzer = BoardAnalyzer.build(board, MoveType.X)
    assert len(analyzer) == 0
    assert analyzer.best_cells() == []


def test_find_capturable_line_for_each_side():
    board = Board(3)
    board.set_state(MoveType.O, 2, 0)
    board.set_state(MoveType.O, 2, 1)
    board.set_state(MoveType.X, 0, 0)

    rows = board.row_iterator()
    found = BoardAnalyzer.find_capturable_line(rows, MoveType.O)
    assert found is rows
    assert rows.line_index == 2

    rows.set_line_index(0)
    assert BoardAnalyzer.find_capturable_line(rows, MoveType.X) is None
    assert rows.line_index == 2


def test_find_capturable_line_skips_dirty_lines():
    board = Board(3)
    board.set_state(MoveType.O, 0, 0)
    board.set_state(MoveType.O, 0, 1)
    board.set_state(MoveType.X, 0, 2)
    assert BoardAnalyzer.find_capturable_line(board.row_iterator(), MoveType.O) is None


def test_find_capturable_line_starts_from_cursor_position():
    board = Board(5)
    for c in range(4):
        board.set_state(MoveType.X, 1, c)
    assert BoardAnalyzer.find_capturable_line(board.row_iterator(2), MoveType.X) is None
    assert BoardAnalyzer.find_capturable_line(board.row_iterator(1), MoveType.X).line_index == 1


def test_empty_observer_rejected():
    board = Board(3)
    with pytest.raises(ValueError):
        BoardAnalyzer.find_capturable_line(board.row_iterator(), MoveType.EMPTY)
    with pytest.raises(ValueError):
        BoardAnalyzer.build(board, MoveType.EMPTY)
