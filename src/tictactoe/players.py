"""Players taking turns on a board: humans and the heuristic computer."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, TYPE_CHECKING

from .analyzer import BoardAnalyzer
from .board import Board, CellCursor
from .types import Coord, MoveType, PlayerKind

if TYPE_CHECKING:
    from .game_controller import GameController

logger = logging.getLogger(__name__)


class NoMoveAvailableError(RuntimeError):
    """Raised when the computer cannot find or place any move."""


class Player:
    """Base class for the two player variants.

    Each player gets the controller's bridge; after writing its move to the
    board it reports the move through ``bridge.notify_move``.
    """

    kind: PlayerKind

    def __init__(self, bridge: "GameController.Bridge", board: Board, side: MoveType) -> None:
        if side is MoveType.EMPTY:
            raise ValueError("A player must be assigned O or X")
        self.bridge = bridge
        self.board = board
        self.side = side

    @property
    def board_size(self) -> int:
        return self.board.side

    def opponent_side(self) -> MoveType:
        return self.side.opponent()

    def _notify_play(self, row: int, column: int) -> None:
        self.bridge.notify_move(self, row, column)

    def play(self) -> Coord:
        raise NotImplementedError


class HumanPlayer(Player):
    """Moves only when the UI passes explicit coordinates."""

    kind = PlayerKind.HUMAN

    def play(self) -> Coord:
        raise NotImplementedError("Human players move through play_at")

    def play_at(self, row: int, column: int) -> None:
        self.bridge.ensure_turn(self)
        if not self.board.set_state(self.side, row, column):
            raise ValueError(f"({row}, {column}) has already been filled")
        self._notify_play(row, column)


class ComputerPlayer(Player):
    """Greedy opponent.

    Priority: complete a line of its own > block an opponent line that is one
    move from completion > a uniformly random empty square. The rows are
    searched before the columns, and the columns before the diagonals.
    """

    kind = PlayerKind.COMPUTER

    def __init__(
        self,
        bridge: "GameController.Bridge",
        board: Board,
        side: MoveType,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__(bridge, board, side)
        self.moves: List[Coord] = []
        self._rng = random.Random(seed)
        self._rows = board.row_iterator()
        self._columns = board.column_iterator()
        self._diagonals = board.diagonal_iterator()

    def _reset_cursors(self) -> None:
        self._rows.set_line_index(0)
        self._columns.set_line_index(0)
        self._diagonals.set_line_index(0)

    def _landing(self, finder: CellCursor) -> Optional[Coord]:
        cursor = finder.closest_empty()
        if cursor.state() is not MoveType.EMPTY:
            return None
        return cursor.position

    def victory_for(self, observer: MoveType) -> Optional[Coord]:
        """Return the square completing a line for ``observer``, if any."""

        self._reset_cursors()
        board = self.board

        if BoardAnalyzer.find_capturable_line(self._rows, observer) is not None:
            row = self._rows.line_index
            logger.debug("Found capturable row %d for %s", row, observer)
            return self._landing(BoardAnalyzer.row_finder(row, board))

        if BoardAnalyzer.find_capturable_line(self._columns, observer) is not None:
            column = self._columns.line_index
            logger.debug("Found capturable column %d for %s", column, observer)
            return self._landing(BoardAnalyzer.column_finder(column, board))

        if BoardAnalyzer.find_capturable_line(self._diagonals, observer) is not None:
            index = self._diagonals.line_index
            logger.debug("Found capturable diagonal %d for %s", index, observer)
            return self._landing(BoardAnalyzer.diagonal_finder(index, board))

        return None

    def random_move(self) -> Optional[Coord]:
        """Pick uniformly among the empty squares, scanning row-major."""

        empty_area = self.board.empty_area
        if empty_area <= 0:
            return None
        remaining = self._rng.randrange(empty_area)
        for r in range(self.board.side):
            for c in range(self.board.side):
                if self.board.get_state(r, c) is MoveType.EMPTY:
                    if remaining == 0:
                        return r, c
                    remaining -= 1
        return None

    def choose_move(self) -> Coord:
        """Decide the next move without placing it."""

        move = self.victory_for(self.side)
        if move is None:
            move = self.victory_for(self.opponent_side())
        if move is None:
            logger.debug("No line to win or block, generating random move for %s", self.side)
            move = self.random_move()
        if move is None:
            raise NoMoveAvailableError(f"No valid move could be found for {self.side}")
        return move

    def play(self) -> Coord:
        row, column = self.choose_move()
        self.moves.append((row, column))
        if not self.board.set_state(self.side, row, column):
            raise NoMoveAvailableError(f"Calculated move not valid at ({row}, {column})")
        self._notify_play(row, column)
        return row, column
