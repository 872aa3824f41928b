"""Console runner for Tic-Tac-Toe.

Usage examples:
- Against the computer: ``python -m tictactoe.runner --size 5 --side X --seed 42``
- Hot-seat game: ``python -m tictactoe.runner --two-player``

Moves are entered as ``row col`` (zero-based), one per line.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, List, Optional, TextIO, Tuple

from .board import Board
from .game_controller import GameController
from .preferences import BOARD_PRESETS, UserPreferences, parse_side, preset_preferences
from .types import GameEvent, GameEventType, GameWonEvent, LineIdentifier, MoveType

COMPUTER_WAIT_SECONDS = 5.0

LINE_NAMES = {
    LineIdentifier.ROW: "row",
    LineIdentifier.COLUMN: "column",
    LineIdentifier.DIAGONAL_ULBR: "diagonal (top-left to bottom-right)",
    LineIdentifier.DIAGONAL_URBL: "diagonal (top-right to bottom-left)",
}


def format_board(board: Board) -> str:
    lines: List[str] = []
    for r in range(board.side):
        cells = []
        for c in range(board.side):
            state = board.get_state(r, c)
            cells.append(" . " if state is MoveType.EMPTY else f" {state} ")
        lines.append("|".join(cells))
    return "\n".join(lines)


def parse_coords(raw: str) -> Tuple[int, int]:
    """Parse ``"row col"`` or ``"row,col"`` into a coordinate pair."""

    parts = raw.replace(",", " ").split()
    if len(parts) != 2:
        raise ValueError("Enter a move as 'row col'")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ValueError("Row and column must be integers") from exc


def describe_outcome(event: Optional[GameEvent]) -> str:
    if event is None:
        return "Game abandoned"
    if isinstance(event, GameWonEvent):
        line = LINE_NAMES.get(event.captured_line_type, "line")
        return f"{event.origin} wins on {line} {event.captured_line_index}"
    if event.type is GameEventType.GAME_DRAWN:
        return "Draw"
    return "Game cancelled"


def play_console(
    controller: GameController,
    lines: Iterable[str],
    out: TextIO,
    wait_seconds: float = COMPUTER_WAIT_SECONDS,
) -> Optional[GameEvent]:
    """Drive ``controller`` from input ``lines`` until the game ends or input runs out."""

    def _on_move(side: MoveType, row: int, column: int) -> None:
        print(f"{side} plays ({row}, {column})", file=out)

    def _prompt() -> None:
        print(format_board(controller.board), file=out)
        mover = controller.get_next_mover()
        side = mover.side if mover is not None else controller.next_turn
        print(f"{side} to move (row col):", file=out)
        out.flush()

    controller.add_move_handler(_on_move)
    controller.start()
    controller.wait_idle(wait_seconds)

    if not controller.is_over:
        _prompt()
        for raw in lines:
            line = raw.strip()
            if not line:
                continue
            if line.lower() in {"quit", "exit"}:
                break
            try:
                row, column = parse_coords(line)
                controller.play_at(row, column)
            except ValueError as exc:
                print(f"Invalid move: {exc}", file=out)
                continue
            controller.wait_idle(wait_seconds)
            if controller.is_over:
                break
            _prompt()

    print(format_board(controller.board), file=out)
    print(describe_outcome(controller.outcome), file=out)
    out.flush()
    return controller.outcome


def _build_preferences(args: argparse.Namespace) -> UserPreferences:
    side = parse_side(args.side)
    if args.preset:
        return preset_preferences(args.preset, side=side)
    return UserPreferences(board_size=args.size, default_side=side)


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Console Tic-Tac-Toe")
    parser.add_argument("--size", type=int, default=3, help="Odd board size between 3 and 11")
    parser.add_argument("--preset", choices=sorted(BOARD_PRESETS), help="Named board size (overrides --size)")
    parser.add_argument("--side", default="O", help="Side played by the human in single-player mode")
    parser.add_argument("--two-player", action="store_true", help="Two humans share the console")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the computer's random moves")
    parser.add_argument("--verbose", action="store_true", help="Log engine decisions to stderr")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        prefs = _build_preferences(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        sys.exit(2)

    controller = GameController.from_preferences(prefs, single_player=not args.two_player, seed=args.seed)
    try:
        play_console(controller, sys.stdin, sys.stdout)
    finally:
        controller.close()


if __name__ == "__main__":
    main()
