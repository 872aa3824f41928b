"""Game controller for UI-driven or scripted play.

This module keeps UI concerns separate from the board and players so that
turn sequencing, win/draw detection, and computer scheduling can be tested
without driving a GUI.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional

from .board import Board
from .players import ComputerPlayer, HumanPlayer, NoMoveAvailableError, Player
from .preferences import UserPreferences, validate_board_size, validate_side
from .types import GameEvent, GameEventType, GameWonEvent, MoveType, PlayerKind

logger = logging.getLogger(__name__)

MoveHandler = Callable[[MoveType, int, int], None]
GameListener = Callable[[GameEvent], None]

CLOSE_TIMEOUT_SECONDS = 0.1


class GameController:
    """Manage one game: the board, both players, turn order, and listeners."""

    class Bridge:
        """Handle given to each player so it can report its moves.

        After a player writes its mark with ``Board.set_state`` it must call
        ``notify_move``.
        """

        def __init__(self, controller: "GameController") -> None:
            self._controller = controller

        def ensure_turn(self, player: Player) -> None:
            self._controller._ensure_turn(player)

        def notify_move(self, mover: Player, row: int, column: int) -> None:
            self._controller._on_move(mover, row, column)

    def __init__(
        self,
        board_size: int,
        human_side: Optional[MoveType] = None,
        seed: Optional[int] = None,
    ) -> None:
        """Create a two-player game, or a single-player one if ``human_side`` is given."""

        self.board = Board(validate_board_size(board_size))
        self.bridge = GameController.Bridge(self)
        self.next_turn = MoveType.O
        self.outcome: Optional[GameEvent] = None
        self._move_handlers: List[MoveHandler] = []
        self._game_listeners: List[GameListener] = []
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tictactoe-computer")
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()
        self._closed = False

        if human_side is None:
            self.o: Player = HumanPlayer(self.bridge, self.board, MoveType.O)
            self.x: Player = HumanPlayer(self.bridge, self.board, MoveType.X)
        elif validate_side(human_side) is MoveType.O:
            self.o = HumanPlayer(self.bridge, self.board, MoveType.O)
            self.x = ComputerPlayer(self.bridge, self.board, MoveType.X, seed=seed)
        else:
            self.o = ComputerPlayer(self.bridge, self.board, MoveType.O, seed=seed)
            self.x = HumanPlayer(self.bridge, self.board, MoveType.X)

    @classmethod
    def new_two_player(cls, board_size: int) -> "GameController":
        return cls(board_size)

    @classmethod
    def new_single_player(
        cls, board_size: int, human_side: MoveType = MoveType.O, seed: Optional[int] = None
    ) -> "GameController":
        return cls(board_size, human_side=validate_side(human_side), seed=seed)

    @classmethod
    def from_preferences(
        cls, prefs: UserPreferences, single_player: bool = True, seed: Optional[int] = None
    ) -> "GameController":
        prefs.validate()
        if single_player:
            return cls.new_single_player(prefs.board_size, prefs.default_side, seed=seed)
        return cls.new_two_player(prefs.board_size)

    @property
    def board_size(self) -> int:
        return self.board.side

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def get_state(self, row: int, column: int) -> MoveType:
        return self.board.get_state(row, column)

    def player_for(self, side: MoveType) -> Player:
        if side is MoveType.O:
            return self.o
        if side is MoveType.X:
            return self.x
        raise ValueError("EMPTY is not a playing side")

    def _human(self, player: Player) -> Optional[HumanPlayer]:
        if player.kind is PlayerKind.HUMAN:
            return player  # type: ignore[return-value]
        return None

    @property
    def player_o(self) -> Optional[HumanPlayer]:
        return self._human(self.o)

    @property
    def player_x(self) -> Optional[HumanPlayer]:
        return self._human(self.x)

    def is_single_player(self) -> bool:
        return self.player_o is None or self.player_x is None

    def is_double_player(self) -> bool:
        return not self.is_single_player()

    def get_next_mover(self) -> Optional[HumanPlayer]:
        """The human expected to move now, or None on the computer's turn."""

        return self._human(self.player_for(self.next_turn))

    def add_move_handler(self, handler: MoveHandler) -> None:
        self._move_handlers.append(handler)

    def add_game_listener(self, listener: GameListener) -> None:
        self._game_listeners.append(listener)

    def start(self) -> None:
        """Schedule the computer's opening move when the computer plays O."""

        if self.outcome is None and self.get_next_mover() is None:
            self._schedule_computer()

    def play_at(self, row: int, column: int) -> None:
        """Place the current human's mark; ValueError on the computer's turn."""

        mover = self.get_next_mover()
        if mover is None:
            raise ValueError("It is the computer's turn")
        mover.play_at(row, column)

    def _ensure_turn(self, player: Player) -> None:
        if self._closed:
            raise RuntimeError("Game controller is closed")
        if self.outcome is not None:
            raise ValueError("The game is already over")
        if player.side is not self.next_turn:
            raise ValueError(f"It is {self.next_turn}'s turn, not {player.side}'s")

    def _on_move(self, mover: Player, row: int, column: int) -> None:
        self.next_turn = self.next_turn.opponent()

        event: Optional[GameEvent] = None
        winner = self.board.find_winner()
        if winner is not MoveType.EMPTY:
            event = GameWonEvent(
                type=GameEventType.GAME_WON,
                origin=winner,
                captured_line_type=self.board.win_cache_identifier,
                captured_line_index=self.board.win_cache_index,
            )
        elif self.board.empty_area == 0:
            event = GameEvent(type=GameEventType.GAME_DRAWN, origin=MoveType.EMPTY)

        # The outcome is recorded even if a handler raises.
        try:
            for handler in list(self._move_handlers):
                handler(mover.side, row, column)
        finally:
            if event is not None:
                self._finish(event)

        if event is None and self.get_next_mover() is None:
            self._schedule_computer()

    def _finish(self, event: GameEvent) -> None:
        with self._lock:
            if self.outcome is not None:
                return
            self.outcome = event
        logger.info("Game finished: %s (origin=%s)", event.type.name, event.origin)
        for listener in list(self._game_listeners):
            listener(event)

    def _schedule_computer(self) -> None:
        player = self.player_for(self.next_turn)
        with self._lock:
            if self._closed:
                return
            self._pending = self._executor.submit(self._run_computer, player)

    def _run_computer(self, player: Player) -> None:
        if self._closed or self.outcome is not None:
            return
        try:
            player.play()
        except NoMoveAvailableError as exc:
            logger.error("Computer %s could not move: %s", player.side, exc)
            self._finish(GameEvent(type=GameEventType.GAME_CANCELLED, origin=player.side))
        except Exception:
            logger.exception("Computer %s failed while moving", player.side)
            raise

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the pending computer move is done; False on timeout."""

        pending = self._pending
        if pending is None:
            return True
        done, _ = wait([pending], timeout=timeout)
        return bool(done)

    def close(self) -> None:
        """Cancel pending computer work and stop the worker. Safe to repeat."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = self._pending
        cancelled = pending is not None and pending.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)
        if pending is not None and not cancelled:
            wait([pending], timeout=CLOSE_TIMEOUT_SECONDS)
        if cancelled:
            self._finish(GameEvent(type=GameEventType.GAME_CANCELLED, origin=MoveType.EMPTY))
