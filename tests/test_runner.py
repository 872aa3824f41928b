import io

import pytest

from tictactoe import runner
from tictactoe.game_controller import GameController
from tictactoe.types import GameEvent, GameEventType, GameWonEvent, LineIdentifier, MoveType


def test_two_player_console_game():
    controller = GameController.new_two_player(3)
    out = io.StringIO()
    try:
        outcome = runner.play_console(controller, ["0 0", "1 1", "0,1", "2 2", "0 2"], out)
    finally:
        controller.close()

    text = out.getvalue()
    assert isinstance(outcome, GameWonEvent)
    assert "O plays (0, 0)" in text
    assert "X plays (1, 1)" in text
    assert text.rstrip().endswith("O wins on row 0")


def test_bad_input_is_reported_and_skipped():
    controller = GameController.new_two_player(3)
    out = io.StringIO()
    try:
        runner.play_console(controller, ["9 9", "a b", "1", "", "1 1", "1 1"], out)
    finally:
        controller.close()

    text = out.getvalue()
    assert text.count("Invalid move") == 4
    assert "Row and column must be integers" in text
    assert "Enter a move as 'row col'" in text
    assert controller.board.dirty_count == 1
    assert text.rstrip().endswith("Game abandoned")


def test_quit_stops_reading():
    controller = GameController.new_two_player(3)
    out = io.StringIO()
    try:
        outcome = runner.play_console(controller, ["0 0", "quit", "1 1"], out)
    finally:
        controller.close()
    assert outcome is None
    assert controller.board.dirty_count == 1


def test_single_player_console_game_finishes():
    controller = GameController.new_single_player(3, seed=21)
    out = io.StringIO()
    lines = [f"{r} {c}" for r in range(3) for c in range(3)]
    try:
        outcome = runner.play_console(controller, lines, out)
    finally:
        controller.close()
    assert outcome is not None
    assert "X plays" in out.getvalue()


def test_format_board():
    controller = GameController.new_two_player(3)
    try:
        controller.play_at(0, 0)
        controller.play_at(2, 1)
        assert runner.format_board(controller.board).splitlines() == [
            " O | . | . ",
            " . | . | . ",
            " . | X | . ",
        ]
    finally:
        controller.close()


@pytest.mark.parametrize("raw,expected", [("1 2", (1, 2)), ("3,4", (3, 4)), (" 0 , 0 ", (0, 0))])
def test_parse_coords(raw, expected):
    assert runner.parse_coords(raw) == expected


@pytest.mark.parametrize("raw", ["", "1", "1 2 3", "a b"])
def test_parse_coords_rejects(raw):
    with pytest.raises(ValueError):
        runner.parse_coords(raw)


def test_describe_outcome():
    won = GameWonEvent(
        type=GameEventType.GAME_WON,
        origin=MoveType.X,
        captured_line_type=LineIdentifier.DIAGONAL_ULBR,
        captured_line_index=0,
    )
    assert runner.describe_outcome(won) == "X wins on diagonal (top-left to bottom-right) 0"
    assert runner.describe_outcome(GameEvent(GameEventType.GAME_DRAWN, MoveType.EMPTY)) == "Draw"
    assert runner.describe_outcome(GameEvent(GameEventType.GAME_CANCELLED, MoveType.X)) == "Game cancelled"
    assert runner.describe_outcome(None) == "Game abandoned"


def test_main_rejects_even_board(capsys):
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--size", "4"])
    assert excinfo.value.code == 2
    assert "Invalid configuration" in capsys.readouterr().out


def test_main_two_player_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("1 1\n0 0\n1 0\n0 1\n1 2\n"))
    runner.main(["--two-player"])
    assert "O wins on row 1" in capsys.readouterr().out
