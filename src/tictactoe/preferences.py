"""User preferences for starting a game: board size and the human's side."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .types import MoveType

DEFAULT_BOARD_SIZE = 3
MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 11

BOARD_PRESETS: Dict[str, int] = {
    "amateur": 3,
    "medium": 5,
    "expert": 7,
    "grandmaster": 9,
}


def validate_board_size(board_size: int) -> int:
    """Return ``board_size`` if it is an odd number in [3, 11]."""

    if not MIN_BOARD_SIZE <= board_size <= MAX_BOARD_SIZE or board_size % 2 == 0:
        raise ValueError(
            f"Board size must be an odd number between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}, got {board_size}"
        )
    return board_size


def validate_side(side: MoveType) -> MoveType:
    if side is MoveType.EMPTY:
        raise ValueError("The human player's side must be O or X, EMPTY is not applicable")
    return side


def parse_side(raw: str) -> MoveType:
    """Parse ``"O"`` or ``"X"`` (case-insensitive) into a playing side."""

    token = raw.strip().upper()
    if token not in {"O", "X"}:
        raise ValueError(f"Unknown side '{raw}', expected O or X")
    return MoveType[token]


@dataclass
class UserPreferences:
    """Settings a front-end passes to the controller."""

    board_size: int = DEFAULT_BOARD_SIZE
    default_side: MoveType = MoveType.O

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        validate_board_size(self.board_size)
        validate_side(self.default_side)

    def set_board_size(self, board_size: int) -> None:
        self.board_size = validate_board_size(board_size)

    def set_default_side(self, side: MoveType) -> None:
        self.default_side = validate_side(side)

    def copy(self) -> "UserPreferences":
        return UserPreferences(board_size=self.board_size, default_side=self.default_side)


_DEFAULT_SETTINGS = UserPreferences()


def default_settings() -> UserPreferences:
    """Shared defaults for front-ends that do not store their own settings."""

    return _DEFAULT_SETTINGS


def preset_preferences(name: str, side: MoveType = MoveType.O) -> UserPreferences:
    preset = name.lower()
    if preset not in BOARD_PRESETS:
        raise ValueError(f"Unknown board preset '{name}'")
    return UserPreferences(board_size=BOARD_PRESETS[preset], default_side=side)
