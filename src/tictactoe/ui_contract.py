"""Widgets that ``ui_tk --self-check`` expects to exist and be mapped."""

from __future__ import annotations

from typing import List

REQUIRED_WIDGET_ATTRS: List[str] = [
    "board_frame",
    "control_frame",
    "btn_new_game",
    "cb_board_preset",
    "rb_mode_single",
    "rb_mode_two",
    "cb_human_side",
    "status_label",
]

REQUIRED_MAPPED_WIDGETS: List[str] = [
    "board_frame",
    "control_frame",
    "btn_new_game",
    "cb_board_preset",
    "status_label",
]
