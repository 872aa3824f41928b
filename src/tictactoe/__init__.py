"""Configurable-size Tic-Tac-Toe game package."""

from .types import GameEvent, GameEventType, GameWonEvent, LineIdentifier, MoveType, PlayerKind
from .board import Board, CellCursor, LineCursor, LineState
from .analyzer import BoardAnalyzer, CellRelations
from .players import ComputerPlayer, HumanPlayer, NoMoveAvailableError, Player
from .preferences import UserPreferences, default_settings, preset_preferences
from .game_controller import GameController

__all__ = [
    "Board",
    "BoardAnalyzer",
    "CellCursor",
    "CellRelations",
    "ComputerPlayer",
    "GameController",
    "GameEvent",
    "GameEventType",
    "GameWonEvent",
    "HumanPlayer",
    "LineCursor",
    "LineIdentifier",
    "LineState",
    "MoveType",
    "NoMoveAvailableError",
    "Player",
    "PlayerKind",
    "UserPreferences",
    "default_settings",
    "preset_preferences",
]
