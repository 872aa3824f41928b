"""Core data structures for the Tic-Tac-Toe engine.

Rule reminders:
- The board is a square grid with coordinates (row, column) from the top-left.
- O always moves first; sides alternate after every accepted move.
- A side wins by filling an entire row, column, or main diagonal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple


Coord = Tuple[int, int]


class MoveType(Enum):
    """State of a single square, or the side making a move."""

    EMPTY = auto()
    O = auto()
    X = auto()

    def opponent(self) -> "MoveType":
        """Return the opposing playing side."""

        if self is MoveType.EMPTY:
            raise ValueError("EMPTY is not a playing side")
        return MoveType.X if self is MoveType.O else MoveType.O

    def is_side(self) -> bool:
        return self is not MoveType.EMPTY

    def __str__(self) -> str:
        return "" if self is MoveType.EMPTY else self.name


class LineIdentifier(Enum):
    """Kinds of capturable lines on the board."""

    ROW = auto()
    COLUMN = auto()
    DIAGONAL_ULBR = auto()
    DIAGONAL_URBL = auto()
    OTHER = auto()


class GameEventType(Enum):
    """Terminal events emitted by the game controller."""

    GAME_WON = auto()
    GAME_DRAWN = auto()
    GAME_CANCELLED = auto()


class PlayerKind(Enum):
    """Tag distinguishing the player variants."""

    HUMAN = auto()
    COMPUTER = auto()


@dataclass(frozen=True)
class GameEvent:
    """A game-ending event. ``origin`` is the winning side, or EMPTY."""

    type: GameEventType
    origin: MoveType


@dataclass(frozen=True)
class GameWonEvent(GameEvent):
    """A win, carrying the line that was captured."""

    captured_line_type: LineIdentifier = LineIdentifier.OTHER
    captured_line_index: int = 0

    def __post_init__(self) -> None:
        if self.captured_line_type is LineIdentifier.OTHER:
            raise ValueError("All capturable lines have a specific type: OTHER is not valid")
