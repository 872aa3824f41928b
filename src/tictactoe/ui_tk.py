"""Tkinter interface for playing against the computer or another human.

Controller callbacks may fire on the computer's worker thread, so they only
push events onto a queue; the Tk thread drains it with ``root.after``.
"""
from __future__ import annotations

import argparse
import logging
import os
import queue
import sys
import time
import tkinter as tk
from tkinter import ttk
from typing import List, Optional, Tuple

from .game_controller import GameController
from .preferences import BOARD_PRESETS, UserPreferences, parse_side, validate_board_size
from .runner import describe_outcome
from .types import GameEvent, MoveType
from .ui_contract import REQUIRED_MAPPED_WIDGETS, REQUIRED_WIDGET_ATTRS


POLL_INTERVAL_MS = 30
BOARD_PIXELS = 480

CELL_COLORS = {
    "empty": "#f5f5f5",
    "O": "#e3f2fd",
    "X": "#fce4ec",
    "win": "#ffb74d",
}

FONT_SIZES = {3: 36, 5: 24, 7: 14, 9: 11, 11: 9}


def parse_selection(preset: str, side: str) -> Tuple[int, MoveType]:
    """Read the board preset (a preset name or a size) and the human side."""

    if preset in BOARD_PRESETS:
        board_size = BOARD_PRESETS[preset]
    else:
        try:
            board_size = int(preset)
        except ValueError as exc:
            raise ValueError(f"Unknown board preset '{preset}'") from exc
        validate_board_size(board_size)
    return board_size, parse_side(side)


class TicTacToeTkApp:
    """Window hosting one ``GameController`` at a time."""

    def __init__(self, prefs: Optional[UserPreferences] = None, single_player: bool = True) -> None:
        self.prefs = prefs.copy() if prefs is not None else UserPreferences()
        self.root = tk.Tk()
        self.root.title("Tic-Tac-Toe")
        self._events: "queue.Queue[Tuple[str, GameController, object]]" = queue.Queue()

        preset_name = next(
            (name for name, size in BOARD_PRESETS.items() if size == self.prefs.board_size),
            str(self.prefs.board_size),
        )
        self.preset_var = tk.StringVar(value=preset_name)
        self.mode_var = tk.StringVar(value="single" if single_player else "two")
        self.side_var = tk.StringVar(value=str(self.prefs.default_side))
        self.status_var = tk.StringVar(value="")

        self.board_buttons: List[List[tk.Button]] = []
        self.controller: Optional[GameController] = None

        self._layout_widgets()
        self.new_game()
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self.root.after(POLL_INTERVAL_MS, self._drain_events)

    def _layout_widgets(self) -> None:
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        board_frame = ttk.Frame(self.root, padding=6, borderwidth=1, relief=tk.SOLID)
        board_frame.grid(row=0, column=0, sticky="nsew", padx=12, pady=8)
        board_frame.grid_propagate(False)
        board_frame.configure(width=BOARD_PIXELS, height=BOARD_PIXELS)
        self.board_frame = board_frame

        control_frame = ttk.Frame(self.root, padding=8)
        control_frame.grid(row=0, column=1, sticky="ns", padx=(0, 12), pady=8)
        self.control_frame = control_frame

        ttk.Label(control_frame, text="Board").grid(row=0, column=0, sticky="w")
        self.cb_board_preset = ttk.Combobox(
            control_frame,
            textvariable=self.preset_var,
            values=list(BOARD_PRESETS),
            state="readonly",
            width=14,
        )
        self.cb_board_preset.grid(row=1, column=0, sticky="ew", pady=(0, 8))

        ttk.Label(control_frame, text="Mode").grid(row=2, column=0, sticky="w")
        self.rb_mode_single = ttk.Radiobutton(
            control_frame, text="Versus computer", variable=self.mode_var, value="single"
        )
        self.rb_mode_single.grid(row=3, column=0, sticky="w")
        self.rb_mode_two = ttk.Radiobutton(control_frame, text="Two players", variable=self.mode_var, value="two")
        self.rb_mode_two.grid(row=4, column=0, sticky="w", pady=(0, 8))

        ttk.Label(control_frame, text="Your side").grid(row=5, column=0, sticky="w")
        self.cb_human_side = ttk.Combobox(
            control_frame, textvariable=self.side_var, values=["O", "X"], state="readonly", width=4
        )
        self.cb_human_side.grid(row=6, column=0, sticky="w", pady=(0, 8))

        self.btn_new_game = ttk.Button(control_frame, text="New game", command=self.new_game)
        self.btn_new_game.grid(row=7, column=0, sticky="ew", pady=(4, 8))

        self.status_label = ttk.Label(control_frame, textvariable=self.status_var, wraplength=180)
        self.status_label.grid(row=8, column=0, sticky="w")

    def _build_board(self, size: int) -> None:
        for row in self.board_buttons:
            for btn in row:
                btn.destroy()
        self.board_buttons = []
        font = ("TkDefaultFont", FONT_SIZES.get(size, 9), "bold")
        for idx in range(max(size, 11)):
            weight = 1 if idx < size else 0
            self.board_frame.columnconfigure(idx, weight=weight, uniform="board" if weight else "")
            self.board_frame.rowconfigure(idx, weight=weight, uniform="board" if weight else "")
        for r in range(size):
            row_buttons: List[tk.Button] = []
            for c in range(size):
                btn = tk.Button(
                    self.board_frame,
                    text="",
                    width=1,
                    height=1,
                    font=font,
                    relief=tk.RAISED,
                    bg=CELL_COLORS["empty"],
                    command=lambda rr=r, cc=c: self._on_square_click(rr, cc),
                )
                btn.grid(row=r, column=c, padx=1, pady=1, sticky="nsew")
                row_buttons.append(btn)
            self.board_buttons.append(row_buttons)

    def new_game(self) -> None:
        try:
            board_size, human_side = parse_selection(self.preset_var.get(), self.side_var.get())
        except ValueError as exc:
            self._set_status(f"Error: {exc}")
            return
        if self.controller is not None:
            self.controller.close()
        self.prefs.set_board_size(board_size)
        self.prefs.set_default_side(human_side)
        controller = GameController.from_preferences(self.prefs, single_player=self.mode_var.get() == "single")
        controller.add_move_handler(lambda side, r, c: self._events.put(("move", controller, (side, r, c))))
        controller.add_game_listener(lambda event: self._events.put(("end", controller, event)))
        self.controller = controller
        self._build_board(controller.board_size)
        self._set_status(self._turn_text())
        controller.start()

    def _turn_text(self) -> str:
        if self.controller is None:
            return ""
        if self.controller.get_next_mover() is None:
            return "Computer is thinking..."
        return f"{self.controller.next_turn} to move"

    def _set_status(self, text: str) -> None:
        self.status_var.set(text)

    def _on_square_click(self, r: int, c: int) -> None:
        controller = self.controller
        if controller is None or controller.closed or controller.is_over:
            self._set_status("Game over, start a new game")
            return
        mover = controller.get_next_mover()
        if mover is None:
            self._set_status("Wait for the computer to move")
            return
        try:
            mover.play_at(r, c)
        except ValueError as exc:
            self._set_status(f"Illegal move: {exc}")

    def _drain_events(self) -> None:
        try:
            while True:
                kind, source, payload = self._events.get_nowait()
                if source is not self.controller:
                    continue
                if kind == "move":
                    side, r, c = payload  # type: ignore[misc]
                    self._show_move(side, r, c)
                else:
                    self._show_end(payload)  # type: ignore[arg-type]
        except queue.Empty:
            pass
        self.root.after(POLL_INTERVAL_MS, self._drain_events)

    def _show_move(self, side: MoveType, r: int, c: int) -> None:
        if r >= len(self.board_buttons) or c >= len(self.board_buttons[r]):
            return
        btn = self.board_buttons[r][c]
        btn.configure(text=str(side), bg=CELL_COLORS.get(str(side), CELL_COLORS["empty"]))
        if self.controller is not None and not self.controller.is_over:
            self._set_status(self._turn_text())

    def _show_end(self, event: GameEvent) -> None:
        if self.controller is not None:
            for r, c in self.controller.board.winning_cells():
                self.board_buttons[r][c].configure(bg=CELL_COLORS["win"])
        self._set_status(describe_outcome(event))

    def _run_ui_contract_check(self) -> List[str]:
        errors: List[str] = []
        for attr in REQUIRED_WIDGET_ATTRS:
            if not hasattr(self, attr):
                errors.append(f"missing attribute '{attr}'")
        self.root.update_idletasks()
        for attr in REQUIRED_MAPPED_WIDGETS:
            if not hasattr(self, attr):
                continue
            if getattr(self, attr).winfo_ismapped() != 1:
                errors.append(f"widget '{attr}' is not mapped")
        size = self.controller.board_size if self.controller is not None else 0
        if len(self.board_buttons) != size or any(len(row) != size for row in self.board_buttons):
            errors.append(f"board grid does not match board size {size}")
        return errors

    def close(self) -> None:
        if self.controller is not None:
            self.controller.close()
        self.root.destroy()

    def run(self) -> None:
        self.root.mainloop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Tic-Tac-Toe Tkinter UI")
    parser.add_argument("--size", type=int, default=3, help="Odd board size between 3 and 11")
    parser.add_argument("--side", default="O", help="Side played by the human against the computer")
    parser.add_argument("--two-player", action="store_true", help="Start in two-player mode")
    parser.add_argument("--self-check", action="store_true", help="run UI contract self-check and exit")
    args = parser.parse_args()
    if args.self_check and os.environ.get("DISPLAY") is None:
        print("UI_SELF_CHECK_SKIP: DISPLAY not set")
        sys.exit(0)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    try:
        prefs = UserPreferences(board_size=args.size, default_side=parse_side(args.side))
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        sys.exit(2)

    app = TicTacToeTkApp(prefs, single_player=not args.two_player)
    if args.self_check:
        for _ in range(50):
            app.root.update_idletasks()
            app.root.update()
            time.sleep(0.01)
        errors = app._run_ui_contract_check()
        if errors:
            print("UI_SELF_CHECK_FAIL")
            for err in errors:
                print(err)
            app.close()
            sys.exit(1)
        print("UI_SELF_CHECK_PASS")
        app.close()
        sys.exit(0)

    app.run()


if __name__ == "__main__":
    main()
